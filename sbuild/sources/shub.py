"""Singularity Hub 来源后端

流程: 配方 from 字段 → 引用解析 → 分配工作空间 → manifest 查询
      → 镜像下载 → 交给 packer 选择器

工作空间归本实例所有:
- get 在分配工作空间之后的任一阶段失败时，先释放工作空间再抛出原异常
- clean_up 幂等，任何时刻调用都安全
- 也可作为上下文管理器使用，退出时自动 clean_up
"""

from __future__ import annotations

import logging
from types import TracebackType

from sbuild.core.config import Config, get_config
from sbuild.core.exceptions import InvalidReferenceError, PackerError
from sbuild.core.models import Bundle, Locator, Manifest, Recipe, Workspace
from sbuild.core.protocols import Packer, PackerSelector, WorkspaceProvider
from sbuild.sources.client import RegistryClient
from sbuild.sources.fetcher import ImageFetcher
from sbuild.sources.locator import PREFIX, parse_reference
from sbuild.utils.net import deadline_after

logger = logging.getLogger(__name__)


class ShubConveyorPacker:
    """从 Singularity Hub 获取镜像"""

    def __init__(
        self,
        config: Config | None = None,
        *,
        workspace_provider: WorkspaceProvider | None = None,
        packer_selector: PackerSelector | None = None,
        client: RegistryClient | None = None,
        fetcher: ImageFetcher | None = None,
    ) -> None:
        self.config = config or get_config()
        if workspace_provider is None:
            from sbuild.services.workspace import WorkspaceManager
            workspace_provider = WorkspaceManager(self.config.workspace_dir)
        if packer_selector is None:
            from sbuild.services.packer import select_packer
            packer_selector = select_packer
        self._workspaces = workspace_provider
        self._select_packer = packer_selector
        self._client = client or RegistryClient(self.config)
        self._fetcher = fetcher or ImageFetcher(self.config)

        self.recipe: Recipe | None = None
        self.locator: Locator | None = None
        self.workspace: Workspace | None = None
        self.manifest: Manifest | None = None
        self.image_path = ""
        self.packer: Packer | None = None

    def get(self, recipe: Recipe, *, timeout: float | None = None) -> None:
        """下载配方指定的镜像并选择 packer

        timeout 为整个获取过程（manifest 查询 + 下载）的截止时间，秒。
        各阶段异常原样抛出，不重试。
        重复调用时先释放上一次的工作空间。
        """
        logger.debug("从 Shub 获取镜像")
        self.clean_up()
        self.workspace = None
        self.manifest = None
        self.image_path = ""
        self.packer = None
        self.recipe = recipe
        deadline = deadline_after(timeout)

        if not recipe.source:
            raise InvalidReferenceError("配方缺少 from 字段")
        try:
            self.locator = parse_reference(
                PREFIX + recipe.source, default_registry=self.config.default_registry,
            )
        except InvalidReferenceError as e:
            logger.error("无效的 shub 引用: %s", e)
            raise

        self.workspace = self._workspaces.new_workspace(self.config.bundle_label)
        try:
            self.manifest = self._client.fetch_manifest(self.locator, deadline=deadline)
            logger.info("manifest 已获取: %s%s", self.manifest.name, self.locator.tag)
            self.image_path = self._fetcher.fetch(
                self.manifest, self.workspace, deadline=deadline,
            )
            self.packer = self._select_packer(self.image_path, self.workspace)
        except Exception as e:
            logger.error("从 Shub 获取镜像失败 %s: %s", self.locator, e)
            self.clean_up()
            raise

    def pack(self) -> Bundle:
        """把已下载镜像交给 packer 物化"""
        if self.packer is None:
            raise PackerError("尚未获取镜像，无法解包")
        return self.packer.pack()

    def clean_up(self) -> None:
        """删除本实例拥有的工作空间（幂等）"""
        if self.workspace is None:
            return
        if self.workspace.remove():
            logger.info("工作空间已清理: %s", self.workspace.path)

    def __enter__(self) -> ShubConveyorPacker:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.clean_up()
