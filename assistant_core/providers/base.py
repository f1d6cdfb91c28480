"""Provider 抽象接口。

上层会话（ConversationSession / SolutionGenerator）不直接依赖具体厂商的 HTTP 调用，
而是依赖此协议：

- 每个厂商实现一个 CompletionBackend（如 GeminiClient）。
- 负责：将 CompletionRequest 转成具体 API 请求，重试，并把响应解析为 CompletionOutcome。

失败以 Failure 值返回而不是抛出，调用方无需 try/except 即可拿到分类后的错误。
"""

from typing import Protocol

from assistant_core.domain.models import CompletionOutcome, CompletionRequest


class CompletionBackend(Protocol):
    """补全客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - complete(req): 执行一次逻辑补全（含内部重试），返回 Success 或 Failure。
    """

    name: str

    async def complete(self, req: CompletionRequest) -> CompletionOutcome:
        ...
