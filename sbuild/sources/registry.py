"""来源后端注册表 - 按引用前缀分派

URI 形如 "shub://owner/container"，"://" 之前的部分为 bootstrap 前缀，
之后的部分写入配方的 from 字段。
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from sbuild.core.config import Config
from sbuild.core.exceptions import ValidationError
from sbuild.core.models import Recipe
from sbuild.core.protocols import ConveyorPacker

logger = logging.getLogger(__name__)

SourceFactory = Callable[..., ConveyorPacker]


class SourceRegistry:
    """bootstrap 前缀 → 来源后端构造器"""

    def __init__(self) -> None:
        self._factories: dict[str, SourceFactory] = {}

    def register(self, prefix: str, factory: SourceFactory) -> None:
        if not prefix:
            raise ValidationError("来源前缀不能为空")
        self._factories[prefix] = factory
        logger.debug("来源后端已注册: %s", prefix)

    def prefixes(self) -> list[str]:
        return sorted(self._factories)

    def create(self, prefix: str, config: Config | None = None, **kwargs: Any) -> ConveyorPacker:
        """按前缀构造来源后端"""
        factory = self._factories.get(prefix)
        if factory is None:
            raise ValidationError(
                f"不支持的来源类型: {prefix!r}，可用: {self.prefixes()}"
            )
        return factory(config, **kwargs)

    def resolve(
        self, uri: str, config: Config | None = None, **kwargs: Any,
    ) -> tuple[ConveyorPacker, Recipe]:
        """把 "prefix://ref" 拆成来源后端和配方"""
        prefix, sep, ref = uri.partition("://")
        if not sep:
            raise ValidationError(f"URI 缺少来源前缀: {uri!r}")
        source = self.create(prefix, config, **kwargs)
        return source, Recipe(header={"bootstrap": prefix, "from": ref})


def default_registry() -> SourceRegistry:
    """包含内置来源后端的注册表"""
    from sbuild.sources.shub import ShubConveyorPacker

    reg = SourceRegistry()
    reg.register("shub", ShubConveyorPacker)
    return reg
