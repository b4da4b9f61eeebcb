"""Singularity Hub registry 客户端

职责:
- 按 Locator 拼接 manifest 地址
- 带超时的 GET 请求，非 2xx 直接失败（不重试）
- 解码 JSON manifest
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request

from sbuild.core.config import Config, get_config
from sbuild.core.exceptions import (
    ManifestDecodeError,
    RegistryStatusError,
    TransientNetworkError,
    UnsupportedRegistryError,
    ValidationError,
)
from sbuild.core.models import Locator, Manifest
from sbuild.utils.net import remaining, validate_url_scheme

logger = logging.getLogger(__name__)


class RegistryClient:
    """registry manifest 查询客户端"""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    def manifest_url(self, locator: Locator) -> str:
        """拼接 manifest 地址: {scheme}://{host_prefix}{locator}"""
        addr = f"{self.config.registry_host_prefix}{locator}"
        host, _, path = addr.partition("/")
        return f"{self.config.registry_scheme}://{host}/{path}"

    def fetch_manifest(self, locator: Locator, *, deadline: float | None = None) -> Manifest:
        """查询镜像 manifest

        Raises:
            UnsupportedRegistryError: 非默认 registry
            TransientNetworkError: 连接失败或超时
            RegistryStatusError: 非 2xx 响应
            ManifestDecodeError: 响应不是约定的 JSON
        """
        if not locator.is_default_registry:
            raise UnsupportedRegistryError(
                f"暂不支持自定义 registry: {locator.registry_path}"
            )

        url = self.manifest_url(locator)
        timeout = remaining(deadline, self.config.manifest_timeout)
        req = urllib.request.Request(url, method="GET")
        req.add_header("User-Agent", self.config.user_agent)
        logger.debug("manifest 请求: %s (timeout=%.1fs)", url, timeout)

        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
                status = resp.status
                if status // 100 != 2:
                    raise RegistryStatusError(f"{status} {resp.reason}", status_code=status)
                body = resp.read()
        except urllib.error.HTTPError as e:
            raise RegistryStatusError(f"{e.code} {e.reason}", status_code=e.code) from e
        except http.client.IncompleteRead as e:
            raise TransientNetworkError(
                f"manifest 响应不完整: {url} - 已接收 {len(e.partial)} 字节"
            ) from e
        except (urllib.error.URLError, OSError, http.client.HTTPException) as e:
            raise TransientNetworkError(f"manifest 请求失败: {url} - {e}") from e

        logger.debug("manifest 响应: %d 字节", len(body))
        return self._decode(body)

    @staticmethod
    def _decode(body: bytes) -> Manifest:
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ManifestDecodeError(f"manifest 不是合法 JSON: {e}") from e

        manifest = Manifest.from_dict(data)
        try:
            validate_url_scheme(manifest.image, context="manifest image")
        except ValidationError as e:
            raise ManifestDecodeError(str(e)) from e
        logger.debug("manifest: %s", manifest.image)
        return manifest
