"""统一异常体系

所有业务异常继承 SbuildError，替代散落的 ValueError / OSError。
CLI 层可据此输出友好提示，调用方可按 code 区分失败阶段。
"""

from __future__ import annotations


class SbuildError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(SbuildError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(SbuildError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class InvalidReferenceError(SbuildError):
    """镜像引用字符串不符合语法"""

    code = "INVALID_REFERENCE"


class UnsupportedRegistryError(SbuildError):
    """请求了非默认的自定义 registry"""

    code = "UNSUPPORTED_REGISTRY"


class TransientNetworkError(SbuildError):
    """网络连接失败或超时（不重试）"""

    code = "NETWORK_ERROR"


class RegistryStatusError(SbuildError):
    """registry 返回非 2xx 状态"""

    code = "REGISTRY_STATUS"

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code


class ManifestDecodeError(SbuildError):
    """manifest 不是合法 JSON 或字段不符合约定"""

    code = "MANIFEST_DECODE"


class IntegrityError(SbuildError):
    """下载字节数与声明长度不一致"""

    code = "INTEGRITY_ERROR"

    def __init__(self, message: str, expected: int = -1, actual: int = 0) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class FilesystemError(SbuildError):
    """工作空间或临时文件创建失败"""

    code = "FILESYSTEM_ERROR"


class PackerError(SbuildError):
    """镜像格式无法识别或无法解包"""

    code = "PACKER_ERROR"
