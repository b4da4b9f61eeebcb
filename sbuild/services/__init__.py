"""外部协作者的默认实现

- workspace.py: 工作空间分配与清理
- packer.py: 镜像格式识别与解包
"""

from sbuild.services.packer import LocalPacker, detect_format, select_packer
from sbuild.services.workspace import WorkspaceManager

__all__ = [
    "WorkspaceManager",
    "LocalPacker",
    "detect_format",
    "select_packer",
]
