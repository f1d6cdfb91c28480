"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 API 层或 UI 层做统一捕获与用户提示。
补全客户端内部用异常区分失败类型，对外再转换为 Failure 结果。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "STORE_WRITE_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 attempt、provider 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等，尚未收到任何响应。"""


class ApiError(BusinessError):
    """第三方 API 返回非 2xx 状态码时抛出。"""


class RateLimitError(ApiError):
    """Provider 限流（429），与其他 HTTP 错误一样按退避策略重试。"""


class MalformedResponseError(BusinessError):
    """2xx 响应中缺少生成文本字段，不重试。"""


class ValidationError(BusinessError):
    """参数或配置校验失败，不会发出网络请求。"""


class SessionBusyError(ValidationError):
    """会话已有进行中的补全，拒绝新的输入。"""

    def __init__(self, message: str = "A reply is still being generated."):
        super().__init__(code="SESSION_BUSY", message=message, http_status=409)


class StoreError(BusinessError):
    """外部文档存储写入失败。"""
