"""核心数据模型

所有核心数据类集中定义，消除 sources ↔ services 的循环依赖。
其他模块统一从此处导入 Locator / Manifest / Workspace 及配方实体。
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from sbuild.core.exceptions import FilesystemError, ManifestDecodeError

logger = logging.getLogger(__name__)


# =========================================================================
# 镜像定位
# =========================================================================


@dataclass(frozen=True)
class Locator:
    """镜像引用的结构化分解

    tag / digest 非空时保留前导的 ':' / '@'，
    owner 与 registry_path 保留末尾的 '/'，
    因此 str(locator) 即为规范形式。
    """

    registry_path: str
    owner: str
    container: str
    tag: str = ""
    digest: str = ""
    is_default_registry: bool = False

    def __str__(self) -> str:
        return self.registry_path + self.owner + self.container + self.tag + self.digest

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Manifest:
    """registry 返回的镜像描述，image 为实际下载地址"""

    image: str
    name: str = ""
    tag: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Manifest:
        """按约定字段解码，结构不符时抛 ManifestDecodeError"""
        if not isinstance(data, dict):
            raise ManifestDecodeError(
                f"manifest 必须是 JSON 对象 (实际类型: {type(data).__name__})"
            )
        values: dict[str, str] = {}
        for key in ("image", "name", "tag", "version"):
            value = data.get(key, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ManifestDecodeError(
                    f"manifest 字段 '{key}' 类型错误: {type(value).__name__}"
                )
            values[key] = value
        if not values["image"]:
            raise ManifestDecodeError("manifest 缺少 image 下载地址")
        return cls(**values)


# =========================================================================
# 工作空间与配方
# =========================================================================


@dataclass
class Workspace:
    """单次获取独占的临时目录"""

    path: str
    label: str = ""

    @property
    def exists(self) -> bool:
        return Path(self.path).is_dir()

    def remove(self) -> bool:
        """递归删除目录，已不存在时为空操作；返回是否实际删除"""
        p = Path(self.path)
        if not p.exists():
            return False
        try:
            shutil.rmtree(p)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise FilesystemError(f"删除工作空间失败 {p}: {e}") from e
        logger.debug("工作空间已删除: %s", p)
        return True


@dataclass
class Recipe:
    """构建配方（仅使用头部字段）"""

    header: dict[str, str] = field(default_factory=dict)

    @property
    def bootstrap(self) -> str:
        return self.header.get("bootstrap", "")

    @property
    def source(self) -> str:
        return self.header.get("from", "")


@dataclass
class Bundle:
    """packer 物化后的结果"""

    rootfs: str
    image_path: str
    format: str
    extracted: bool = False
