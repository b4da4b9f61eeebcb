"""来源后端注册表测试"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from sbuild.core.config import Config
from sbuild.core.exceptions import ValidationError
from sbuild.sources.registry import SourceRegistry, default_registry
from sbuild.sources.shub import ShubConveyorPacker


class TestSourceRegistry:
    def test_builtin_shub(self) -> None:
        reg = default_registry()
        assert reg.prefixes() == ["shub"]
        cfg = Config()
        source, recipe = reg.resolve("shub://vsoch/hello-world:latest", cfg)
        assert isinstance(source, ShubConveyorPacker)
        assert source.config is cfg
        assert recipe.bootstrap == "shub"
        assert recipe.source == "vsoch/hello-world:latest"

    def test_unknown_prefix(self) -> None:
        with pytest.raises(ValidationError, match="不支持的来源类型"):
            default_registry().resolve("docker://library/alpine")

    def test_missing_prefix(self) -> None:
        with pytest.raises(ValidationError, match="缺少来源前缀"):
            default_registry().resolve("vsoch/hello-world")

    def test_register_custom_factory(self) -> None:
        reg = SourceRegistry()
        factory = MagicMock()
        reg.register("local", factory)
        source, recipe = reg.resolve("local://images/a.sif", extra=1)
        factory.assert_called_once_with(None, extra=1)
        assert source is factory.return_value
        assert recipe.source == "images/a.sif"

    def test_empty_prefix_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SourceRegistry().register("", MagicMock())
