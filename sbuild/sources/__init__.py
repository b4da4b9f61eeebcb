"""来源获取模块

拆分说明:
- locator.py: shub 引用解析
- client.py: registry manifest 查询
- fetcher.py: 镜像流式下载 + 大小校验
- shub.py: 获取流程编排 (get / clean_up / pack)
- registry.py: 按前缀分派来源后端
"""

from sbuild.sources.client import RegistryClient
from sbuild.sources.fetcher import ImageFetcher
from sbuild.sources.locator import parse_reference
from sbuild.sources.registry import SourceRegistry, default_registry
from sbuild.sources.shub import ShubConveyorPacker

__all__ = [
    "parse_reference",
    "RegistryClient",
    "ImageFetcher",
    "ShubConveyorPacker",
    "SourceRegistry",
    "default_registry",
]
