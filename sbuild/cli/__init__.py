"""sbuild 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from sbuild import __version__
from sbuild.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """sbuild - 容器镜像来源获取"""
    setup_logging(
        level=os.getenv("SBUILD_LOG_LEVEL", "INFO"),
        json_output=os.getenv("SBUILD_LOG_JSON", "") == "1",
    )


# 注册各领域子命令
from sbuild.cli.cmd_source import register as _reg_source  # noqa: E402

_reg_source(main)
