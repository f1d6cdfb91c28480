"""统一的对话与补全结果数据模型。

本模块定义了会话层与 Provider 适配层之间共享的标准数据结构：

- Message: 一条对话记录（user/assistant），按插入顺序组成对话记录。
- CompletionRequest: 发给补全接口的一次请求（历史 + 系统指令）。
- Success / Failure: 一次补全调用的最终结果，二者合称 CompletionOutcome。

会话层只使用 "user"/"assistant" 两种角色，Provider 侧的角色名
（如 Gemini 的 "model"）由各 Provider 适配器自行映射。
"""

from dataclasses import dataclass
from typing import List, Literal, Optional, Union

from assistant_core.domain.exceptions import (
    BusinessError,
    MalformedResponseError,
    NetworkError,
    ApiError,
)


# 会话内部的消息角色，与具体厂商无关
Role = Literal["user", "assistant"]

# 失败分类：network/http 可重试，其余立即返回
ErrorKind = Literal["network", "http", "malformed_response", "validation"]


@dataclass(frozen=True)
class Message:
    """对话记录中的一条消息。"""

    role: Role
    text: str


@dataclass
class CompletionRequest:
    """一次补全请求，按调用临时构造，不做保留。

    - history: 完整的有序对话历史，最后一条应为最新的用户消息。
    - system_instruction: 会话固定的系统指令（人设与任务规则）。
    """

    history: List[Message]
    system_instruction: str


@dataclass(frozen=True)
class Success:
    """补全成功，text 为模型生成的文本。"""

    text: str
    attempts: int = 1

    ok = True


@dataclass(frozen=True)
class Failure:
    """补全失败。

    - kind: 失败分类（network/http/malformed_response/validation）。
    - message: 可读的错误描述。
    - status_code: HTTP 失败时的状态码。
    - attempts: 实际发出的请求次数，校验失败时为 0。
    """

    kind: ErrorKind
    message: str
    status_code: Optional[int] = None
    attempts: int = 0

    ok = False

    @classmethod
    def from_error(cls, exc: BusinessError, attempts: int = 0) -> "Failure":
        """把内部 BusinessError 转换为对外的 Failure。"""

        if isinstance(exc, NetworkError):
            kind: ErrorKind = "network"
        elif isinstance(exc, ApiError):
            kind = "http"
        elif isinstance(exc, MalformedResponseError):
            kind = "malformed_response"
        else:
            kind = "validation"
        status = exc.http_status if kind == "http" else None
        return cls(kind=kind, message=exc.message, status_code=status, attempts=attempts)


CompletionOutcome = Union[Success, Failure]
