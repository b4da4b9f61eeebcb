"""网络工具 — URL 安全校验与截止时间计算"""

from __future__ import annotations

import time
from urllib.parse import urlparse

from sbuild.core.exceptions import TransientNetworkError, ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def deadline_after(timeout: float | None) -> float | None:
    """把相对超时（秒）转换为 time.monotonic() 基准的绝对截止时间"""
    if timeout is None:
        return None
    return time.monotonic() + timeout


def remaining(deadline: float | None, cap: float | None = None) -> float | None:
    """距截止时间的剩余秒数，与 cap 取较小值；已过期抛 TransientNetworkError"""
    if deadline is None:
        return cap
    left = deadline - time.monotonic()
    if left <= 0:
        raise TransientNetworkError("已超过截止时间")
    return left if cap is None else min(left, cap)
