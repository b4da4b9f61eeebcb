"""镜像下载器

边下载边写盘，不在内存中缓存完整镜像；
下载完成后比对写入字节数与 Content-Length。
"""

from __future__ import annotations

import http.client
import logging
import os
import tempfile
import time
import urllib.error
import urllib.request
from pathlib import Path
from typing import BinaryIO

from sbuild.core.config import Config, get_config
from sbuild.core.exceptions import (
    FilesystemError,
    IntegrityError,
    RegistryStatusError,
    TransientNetworkError,
)
from sbuild.core.models import Manifest, Workspace
from sbuild.utils.net import remaining, validate_url_scheme

logger = logging.getLogger(__name__)


class ImageFetcher:
    """按 manifest 下载镜像到工作空间"""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    def fetch(
        self, manifest: Manifest, workspace: Workspace, *, deadline: float | None = None,
    ) -> str:
        """下载镜像，返回临时文件的绝对路径

        大小不一致时抛 IntegrityError，已写入的部分文件保留在工作空间中，
        由工作空间的所有者负责清理。
        """
        validate_url_scheme(manifest.image, context="image download")
        if deadline is None and self.config.download_timeout is not None:
            deadline = time.monotonic() + self.config.download_timeout

        try:
            fd, tmp = tempfile.mkstemp(dir=workspace.path, prefix=self.config.temp_prefix)
        except OSError as e:
            raise FilesystemError(f"创建临时文件失败 {workspace.path}: {e}") from e
        path = str(Path(tmp).resolve())
        logger.debug("创建临时镜像文件: %s", path)

        with os.fdopen(fd, "wb") as out:
            try:
                req = urllib.request.Request(manifest.image)
                req.add_header("User-Agent", self.config.user_agent)
                with urllib.request.urlopen(req, timeout=remaining(deadline)) as resp:  # nosec B310
                    expected = self._content_length(resp)
                    written = self._copy(resp, out, deadline, expected)
            except urllib.error.HTTPError as e:
                raise RegistryStatusError(
                    f"{e.code} {e.reason}", status_code=e.code,
                ) from e
            except (urllib.error.URLError, OSError, http.client.HTTPException) as e:
                raise TransientNetworkError(
                    f"镜像下载失败: {manifest.image} - {e}"
                ) from e

        if expected is None:
            raise IntegrityError(
                f"响应缺少 Content-Length，无法校验镜像大小 (已写入 {written} 字节)",
                actual=written,
            )
        if written != expected:
            raise IntegrityError(
                f"镜像大小不符: 应为 {expected}, 实际 {written}",
                expected=expected, actual=written,
            )

        logger.info("镜像已下载: %s (%d 字节)", path, written)
        return path

    @staticmethod
    def _content_length(resp: http.client.HTTPResponse) -> int | None:
        raw = resp.headers.get("Content-Length")
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def _copy(
        self, resp: http.client.HTTPResponse, out: BinaryIO,
        deadline: float | None, expected: int | None,
    ) -> int:
        """分块拷贝响应体，截止时间在每块之间检查

        响应提前结束（IncompleteRead）时，已收到的部分照常写盘，
        再以累计字节数抛 IntegrityError。
        """
        written = 0
        while True:
            remaining(deadline)
            try:
                chunk = resp.read(self.config.chunk_size)
            except http.client.IncompleteRead as e:
                written += self._write(out, e.partial)
                raise IntegrityError(
                    f"镜像下载不完整: 应为 {expected}, 实际 {written}",
                    expected=-1 if expected is None else expected, actual=written,
                ) from e
            if not chunk:
                break
            written += self._write(out, chunk)
        return written

    @staticmethod
    def _write(out: BinaryIO, chunk: bytes) -> int:
        try:
            out.write(chunk)
        except OSError as e:
            raise FilesystemError(f"写入临时镜像文件失败: {e}") from e
        return len(chunk)
