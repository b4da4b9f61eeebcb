"""工作空间管理 - 分配、列出和清理本地临时目录

每次获取独占一个唯一命名的目录，目录名前缀为调用方给出的 label。
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from sbuild.core.exceptions import FilesystemError
from sbuild.core.models import Workspace

logger = logging.getLogger(__name__)


class WorkspaceManager:
    """工作空间管理器"""

    def __init__(self, workspace_root: str = "") -> None:
        if not workspace_root:
            from sbuild.core.config import get_config
            workspace_root = get_config().workspace_dir
        self.workspace_root = Path(workspace_root) if workspace_root else None

    def new_workspace(self, label: str) -> Workspace:
        """分配一个全新的可写目录"""
        root = None
        try:
            if self.workspace_root is not None:
                self.workspace_root.mkdir(parents=True, exist_ok=True)
                root = str(self.workspace_root)
            path = tempfile.mkdtemp(prefix=f"{label}-", dir=root)
        except OSError as e:
            raise FilesystemError(f"创建工作空间失败 ({label}): {e}") from e
        logger.debug("工作空间已创建: %s", path)
        return Workspace(path=path, label=label)

    def list_workspaces(self, label: str = "") -> list[Workspace]:
        """列出根目录下的工作空间（按 label 前缀过滤）"""
        if self.workspace_root is None or not self.workspace_root.exists():
            return []
        prefix = f"{label}-" if label else ""
        return [
            Workspace(path=str(d), label=d.name.rsplit("-", 1)[0])
            for d in sorted(self.workspace_root.iterdir())
            if d.is_dir() and d.name.startswith(prefix)
        ]

    def clean(self, label: str = "") -> int:
        """清理根目录下的工作空间，返回清理的目录数"""
        count = sum(1 for ws in self.list_workspaces(label) if ws.remove())
        logger.info("已清理 %d 个工作空间", count)
        return count
