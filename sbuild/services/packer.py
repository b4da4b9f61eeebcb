"""本地 packer 选择 - 按文件头识别下载的镜像格式

支持识别:
- sif: SIF 容器（偏移 32 处为 SIF_MAGIC）
- squashfs: 文件头 hsqs
- ext3: 偏移 1080 处为 0xEF53
- tar: tarfile 可识别的归档（含压缩）

tar 与 squashfs 可解包到工作空间的 rootfs 目录，
sif / ext3 需要挂载或分区提取，本地 packer 不支持。
"""

from __future__ import annotations

import logging
import tarfile
from pathlib import Path

from sbuild.core.exceptions import PackerError
from sbuild.core.models import Bundle, Workspace
from sbuild.utils.shell import run_cmd

logger = logging.getLogger(__name__)

_SIF_MAGIC = b"SIF_MAGIC"
_SIF_MAGIC_OFFSET = 32
_SQUASHFS_MAGIC = b"hsqs"
_EXT_MAGIC = b"\x53\xef"
_EXT_MAGIC_OFFSET = 1080


def detect_format(path: str) -> str:
    """识别镜像格式，无法识别时抛 PackerError"""
    p = Path(path)
    try:
        with open(p, "rb") as f:
            head = f.read(_EXT_MAGIC_OFFSET + len(_EXT_MAGIC))
    except OSError as e:
        raise PackerError(f"无法读取镜像文件 {p}: {e}") from e

    if head[_SIF_MAGIC_OFFSET:_SIF_MAGIC_OFFSET + len(_SIF_MAGIC)] == _SIF_MAGIC:
        return "sif"
    if head[:len(_SQUASHFS_MAGIC)] == _SQUASHFS_MAGIC:
        return "squashfs"
    if head[_EXT_MAGIC_OFFSET:] == _EXT_MAGIC:
        return "ext3"
    if tarfile.is_tarfile(str(p)):
        return "tar"
    raise PackerError(f"无法识别的镜像格式: {p}")


class LocalPacker:
    """把已下载镜像物化到工作空间"""

    def __init__(self, image_path: str, workspace: Workspace, fmt: str) -> None:
        self.image_path = image_path
        self.workspace = workspace
        self.format = fmt

    @property
    def rootfs(self) -> Path:
        return Path(self.workspace.path) / "rootfs"

    def pack(self) -> Bundle:
        """解包镜像到 rootfs"""
        if self.format == "tar":
            self._extract_tar()
        elif self.format == "squashfs":
            run_cmd(
                ["unsquashfs", "-f", "-d", str(self.rootfs), self.image_path],
                cwd=self.workspace.path, label="unsquashfs",
            )
        else:
            raise PackerError(f"本地 packer 不支持解包 {self.format} 格式: {self.image_path}")
        logger.info("镜像已解包: %s -> %s", self.image_path, self.rootfs)
        return Bundle(
            rootfs=str(self.rootfs), image_path=self.image_path,
            format=self.format, extracted=True,
        )

    def _extract_tar(self) -> None:
        self.rootfs.mkdir(parents=True, exist_ok=True)
        try:
            with tarfile.open(self.image_path) as tf:
                tf.extractall(path=str(self.rootfs), filter="data")  # noqa: S202
        except (OSError, tarfile.TarError) as e:
            raise PackerError(f"tar 解包失败 {self.image_path}: {e}") from e


def select_packer(path: str, workspace: Workspace) -> LocalPacker:
    """检查镜像文件并返回对应 packer"""
    fmt = detect_format(path)
    logger.debug("镜像格式: %s (%s)", fmt, path)
    return LocalPacker(path, workspace, fmt)
