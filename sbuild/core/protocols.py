"""领域协议定义

集中定义获取阶段与外部协作者之间的接口契约（Protocol），
实现依赖倒置 — 编排器依赖抽象而非具体实现。

使用 typing.Protocol 而非 ABC，使得测试替身无需继承即可满足协议。
"""

from __future__ import annotations

from typing import Protocol

from sbuild.core.models import Bundle, Recipe, Workspace


# =========================================================================
# 工作空间协议
# =========================================================================

class WorkspaceProvider(Protocol):
    """工作空间分配者协议"""

    def new_workspace(self, label: str) -> Workspace:
        """分配一个全新的可写目录"""
        ...


# =========================================================================
# Packer 协议
# =========================================================================

class Packer(Protocol):
    """将下载的原始镜像物化为最终布局的能力"""

    def pack(self) -> Bundle:
        """执行解包，返回 Bundle"""
        ...


class PackerSelector(Protocol):
    """Packer 选择器协议 — 检查镜像文件并返回对应 Packer"""

    def __call__(self, path: str, workspace: Workspace) -> Packer:
        ...


# =========================================================================
# 来源后端协议
# =========================================================================

class ConveyorPacker(Protocol):
    """来源后端协议

    每种来源（shub 等）实现 get / clean_up / pack，
    由 SourceRegistry 按前缀分派。
    """

    image_path: str

    def get(self, recipe: Recipe, *, timeout: float | None = None) -> None:
        """获取镜像到独占工作空间"""
        ...

    def clean_up(self) -> None:
        """释放工作空间（幂等）"""
        ...

    def pack(self) -> Bundle:
        """将获取的镜像交给 packer 物化"""
        ...
