"""Shell 命令执行工具 — 统一子进程调用"""

from __future__ import annotations

import logging
import subprocess

from sbuild.core.exceptions import PackerError

logger = logging.getLogger(__name__)


def run_cmd(
    args: list[str], *, cwd: str = ".",
    label: str = "cmd",
) -> subprocess.CompletedProcess[str]:
    """执行外部命令，失败或命令不存在时抛 PackerError

    Args:
        args: 命令参数列表（不经过 shell）
        cwd: 工作目录
        label: 日志标签
    """
    logger.info("  %s: %s (cwd=%s)", label, " ".join(args), cwd)
    try:
        r = subprocess.run(
            args, capture_output=True, text=True,
            cwd=cwd, check=False,
        )
    except FileNotFoundError as e:
        raise PackerError(f"{label}失败: 找不到命令 {args[0]}") from e
    if r.returncode != 0:
        raise PackerError(f"{label}失败 (rc={r.returncode}): {r.stderr[:500]}")
    return r
