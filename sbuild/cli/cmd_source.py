"""CLI — 来源获取命令"""

from __future__ import annotations

import click

from sbuild.core.exceptions import SbuildError


def register(group: click.Group) -> None:
    group.add_command(parse)
    group.add_command(pull)
    group.add_command(clean)


@click.command()
@click.argument("ref")
def parse(ref: str) -> None:
    """解析 shub 引用（如 //owner/container:tag）并打印各字段"""
    from sbuild.core.config import get_config
    from sbuild.sources.locator import parse_reference

    try:
        loc = parse_reference(ref, default_registry=get_config().default_registry)
    except SbuildError as e:
        raise click.ClickException(str(e)) from e
    for key, value in loc.to_dict().items():
        click.echo(f"  {key:20s} {value}")
    click.echo(f"  {'canonical':20s} {loc}")


@click.command()
@click.argument("uri")
@click.option("--config", "config_path", default=None, help="配置文件路径")
@click.option("--timeout", type=float, default=None, help="整体截止时间（秒）")
@click.option("--workspace-dir", default=None, help="工作空间根目录")
@click.option("--keep", is_flag=True, help="完成后保留工作空间")
@click.option("--unpack", is_flag=True, help="下载后交给 packer 解包")
def pull(
    uri: str, config_path: str | None, timeout: float | None,
    workspace_dir: str | None, keep: bool, unpack: bool,
) -> None:
    """按 URI（如 shub://owner/container）获取镜像"""
    from sbuild.core.config import get_config, init_config
    from sbuild.sources.registry import default_registry

    try:
        cfg = init_config(config_path) if config_path else get_config()
        if workspace_dir:
            cfg.workspace_dir = workspace_dir
        source, recipe = default_registry().resolve(uri, cfg)
    except SbuildError as e:
        raise click.ClickException(str(e)) from e

    try:
        source.get(recipe, timeout=timeout)
        click.echo(f"镜像: {source.image_path}")
        if unpack:
            bundle = source.pack()
            click.echo(f"rootfs: {bundle.rootfs} ({bundle.format})")
    except SbuildError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    finally:
        if not keep:
            source.clean_up()


@click.command()
@click.option("--config", "config_path", default=None, help="配置文件路径")
@click.option("--workspace-dir", default=None, help="工作空间根目录（默认取配置，再退回系统临时目录）")
@click.option("--label", default=None, help="工作空间前缀（默认 bundle_label）")
@click.option("--dry-run", is_flag=True, help="只列出，不删除")
def clean(
    config_path: str | None, workspace_dir: str | None,
    label: str | None, dry_run: bool,
) -> None:
    """清理 pull --keep 或异常退出遗留的工作空间"""
    import tempfile

    from sbuild.core.config import get_config, init_config
    from sbuild.services.workspace import WorkspaceManager

    try:
        cfg = init_config(config_path) if config_path else get_config()
    except SbuildError as e:
        raise click.ClickException(str(e)) from e
    label = cfg.bundle_label if label is None else label
    if not label:
        raise click.ClickException("--label 不能为空")

    root = workspace_dir or cfg.workspace_dir or tempfile.gettempdir()
    mgr = WorkspaceManager(root)
    if dry_run:
        for ws in mgr.list_workspaces(label):
            click.echo(ws.path)
        return
    click.echo(f"已清理 {mgr.clean(label)} 个工作空间")
