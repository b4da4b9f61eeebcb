"""公共测试夹具: 网络替身 + 全局配置隔离"""

from __future__ import annotations

import io
from typing import Any, Callable

import pytest

import sbuild.core.config as cfgmod


class FakeResponse(io.BytesIO):
    """模拟 urlopen 返回的 HTTPResponse（status / reason / headers / read）"""

    def __init__(
        self,
        body: bytes = b"",
        *,
        status: int = 200,
        reason: str = "OK",
        headers: dict[str, str] | None = None,
        content_length: bool = True,
    ) -> None:
        super().__init__(body)
        self.status = status
        self.reason = reason
        self.headers = dict(headers or {})
        if content_length and "Content-Length" not in self.headers:
            self.headers["Content-Length"] = str(len(body))


class UrlopenStub:
    """记录每次 urlopen 调用，按 handler 返回响应或抛异常"""

    def __init__(self, handler: Callable[[str], Any]) -> None:
        self.handler = handler
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, req: Any, timeout: Any = None) -> Any:
        self.calls.append((req, timeout))
        url = req if isinstance(req, str) else req.full_url
        result = self.handler(url)
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cfgmod, "_current", None)


@pytest.fixture()
def stub_urlopen(monkeypatch: pytest.MonkeyPatch) -> Callable[..., UrlopenStub]:
    """安装 urlopen 替身: 传入固定响应/异常，或 url -> 响应 的函数"""

    def install(result: Any) -> UrlopenStub:
        handler = result if callable(result) else (lambda _url: result)
        stub = UrlopenStub(handler)
        monkeypatch.setattr("urllib.request.urlopen", stub)
        return stub

    return install


@pytest.fixture()
def make_response() -> type[FakeResponse]:
    return FakeResponse
