"""shub 镜像引用解析

引用格式（锚定，必须完整匹配）:
    //[registry/]*owner/container[:tag][@digest]

- registry 段与 owner 段: [-a-zA-Z0-9]
- container 段与 tag 段: 额外允许 '.' 和 '_'
- digest: '@' + 32 位小写十六进制（md5）
"""

from __future__ import annotations

import logging
import re

from sbuild.core.config import DEFAULT_REGISTRY
from sbuild.core.exceptions import InvalidReferenceError
from sbuild.core.models import Locator

logger = logging.getLogger(__name__)

PREFIX = "//"

_REGISTRY_RE = r"(?:[-a-zA-Z0-9]{1,64}/)*"    # 自定义 registry，可多段
_OWNER_RE = r"[-a-zA-Z0-9]{1,39}/"            # GitHub 用户名
_CONTAINER_RE = r"[-_.a-zA-Z0-9]{1,64}"       # GitHub 仓库名
_TAG_RE = r"(?::[-_.a-zA-Z0-9]{1,64})?"       # 分支名或扩展名
_DIGEST_RE = r"(?:@[a-f0-9]{32})?"            # md5

REFERENCE_RE = re.compile(
    re.escape(PREFIX) + _REGISTRY_RE + _OWNER_RE + _CONTAINER_RE + _TAG_RE + _DIGEST_RE
)


def parse_reference(src: str, *, default_registry: str = DEFAULT_REGISTRY) -> Locator:
    """解析 shub 引用为 Locator

    整串不匹配语法时抛 InvalidReferenceError，不返回部分结果。
    只有 owner/container 两段时使用 default_registry。
    """
    if REFERENCE_RE.fullmatch(src) is None:
        raise InvalidReferenceError(f"不是合法的 shub 引用: {src!r}")

    rest = src[len(PREFIX):]
    pieces = rest.split("/")
    # 语法保证至少两段
    if len(pieces) > 2:
        registry_path = "/".join(pieces[:-2]) + "/"
        is_default = False
    else:
        registry_path = default_registry
        is_default = True
    owner = pieces[-2] + "/"
    rest = pieces[-1]

    digest = ""
    if "@" in rest:
        rest, _, tail = rest.partition("@")
        digest = "@" + tail

    tag = ""
    if ":" in rest:
        rest, _, tail = rest.partition(":")
        tag = ":" + tail

    locator = Locator(
        registry_path=registry_path,
        owner=owner,
        container=rest,
        tag=tag,
        digest=digest,
        is_default_registry=is_default,
    )
    logger.debug("引用已解析: %s -> %s", src, locator)
    return locator
