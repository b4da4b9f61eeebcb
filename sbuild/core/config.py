"""集中配置管理

替代各模块散落的默认 registry / 超时等常量，提供统一的配置入口。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field

from sbuild import __version__
from sbuild.core.exceptions import ConfigError
from sbuild.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY = "singularity-hub.org/api/container/"


@dataclass
class Config:
    """来源获取阶段的全局配置"""

    # registry
    default_registry: str = DEFAULT_REGISTRY
    registry_scheme: str = "https"
    registry_host_prefix: str = "www."
    user_agent: str = f"sbuild/{__version__}"

    # 网络
    manifest_timeout: float = 30.0
    download_timeout: float | None = None  # None 表示下载阶段不限时
    chunk_size: int = 64 * 1024

    # 文件系统
    workspace_dir: str = ""  # 空则使用系统临时目录
    temp_prefix: str = "shub-container"
    bundle_label: str = "sbuild-shub"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.default_registry:
            raise ConfigError("default_registry 不能为空")
        if not self.default_registry.endswith("/"):
            self.default_registry += "/"
        if self.registry_scheme not in ("http", "https"):
            raise ConfigError(f"不支持的 registry 协议: {self.registry_scheme}")
        if self.manifest_timeout <= 0:
            raise ConfigError(f"manifest_timeout 必须为正数: {self.manifest_timeout}")
        if self.download_timeout is not None and self.download_timeout <= 0:
            raise ConfigError(f"download_timeout 必须为正数: {self.download_timeout}")
        if self.chunk_size <= 0:
            raise ConfigError(f"chunk_size 必须为正数: {self.chunk_size}")

    @classmethod
    def from_file(cls, path: str = "configs/sbuild.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known and k != "extra"}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件内容无效 {path}: {e}") from e
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/sbuild.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
