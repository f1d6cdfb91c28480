"""Gemini Provider 适配器。

本模块负责：

1. 接收统一的 CompletionRequest。
2. 将其转换为 generateContent 的 HTTP 请求格式（含角色映射）。
3. 调用 HTTP 接口，对网络错误与非 2xx 响应按指数退避重试。
4. 从响应 JSON 中取出生成文本，返回 Success / Failure。

重试策略统一为：任何不成功的请求（传输异常或非 2xx 状态）都会等待
base * factor ** attempt 毫秒后重试，最多 max_retries 次，最后一次失败后不再等待。
2xx 但缺少生成文本的响应直接返回 malformed_response，不重试。
"""

import asyncio
import random
from typing import Any, Awaitable, Callable, Dict, Optional
from uuid import uuid4

import httpx

from assistant_core.domain.exceptions import (
    ApiError,
    BusinessError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
    ValidationError,
)
from assistant_core.domain.models import (
    CompletionOutcome,
    CompletionRequest,
    Failure,
    Message,
    Role,
    Success,
)
from assistant_core.infrastructure.logging.logger import logger
from assistant_core.providers.registry import CompletionConfig


DEFAULT_MALFORMED_MESSAGE = "Failed to get a valid response from AI."

# 会话角色 -> Gemini contents.role
_PROVIDER_ROLES: Dict[Role, str] = {
    "user": "user",
    "assistant": "model",
}


def to_provider_role(role: Role) -> str:
    """把会话内部角色映射为 Gemini 的角色名。"""

    try:
        return _PROVIDER_ROLES[role]
    except KeyError:
        raise ValidationError(code="INVALID_ROLE", message=f"Unsupported role: {role!r}")


class GeminiClient:
    """Gemini generateContent 客户端实现。

    - name: Provider 名称（供日志/调试使用）。
    - complete: 对外统一调用入口，返回 CompletionOutcome，不抛出业务异常。
    """

    name = "gemini"

    def __init__(
        self,
        config: CompletionConfig,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        rng: Optional[Callable[[], float]] = None,
    ):
        # sleep / rng 可注入，便于测试记录退避时间
        self._config = config
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.random

    @property
    def config(self) -> CompletionConfig:
        return self._config

    async def complete(self, req: CompletionRequest) -> CompletionOutcome:
        """执行一次逻辑补全。

        状态流转：Idle -> Attempting(n) -> Success | Attempting(n+1) | Failure。
        任务被取消时 CancelledError 会在 HTTP 调用或退避等待处直接抛出。
        """

        trace_id = f"tr-{uuid4().hex}"
        log_ctx: Dict[str, Any] = {"trace_id": trace_id, "provider": self.name}
        try:
            self._validate(req)
            payload = self._build_payload(req)
        except ValidationError as e:
            self._log_warning("Completion request rejected", log_ctx, code=e.code, error=e.message)
            return Failure.from_error(e)

        max_retries = self._config.max_retries
        async with httpx.AsyncClient(timeout=self._config.http_timeout, trust_env=False) as client:
            for attempt in range(max_retries):
                try:
                    resp = await self._post(client, payload)
                except (NetworkError, ApiError) as e:
                    self._log_warning(
                        "Completion attempt failed",
                        log_ctx,
                        attempt=attempt + 1,
                        code=e.code,
                        http_status=e.http_status if isinstance(e, ApiError) else None,
                        error=e.message,
                    )
                    if attempt == max_retries - 1:
                        return self._exhausted(e, log_ctx, max_retries)
                    delay = self._config.backoff_seconds(attempt, self._rng())
                    self._log_info("Backing off before retry", log_ctx, attempt=attempt + 1, delay_seconds=delay)
                    await self._sleep(delay)
                    continue

                try:
                    text = self._parse_response(resp)
                except MalformedResponseError as e:
                    self._log_warning("Malformed completion response", log_ctx, attempt=attempt + 1, error=e.message)
                    return Failure.from_error(e, attempts=attempt + 1)
                self._log_info("Completion succeeded", log_ctx, attempts=attempt + 1)
                return Success(text=text, attempts=attempt + 1)
        # max_retries >= 1 由 CompletionConfig 保证，循环内必然返回
        raise RuntimeError("retry loop exited without an outcome")

    @staticmethod
    def _exhausted(error: BusinessError, log_ctx: Dict[str, Any], attempts: int) -> Failure:
        """最后一次尝试仍失败：记录错误并返回对应分类的 Failure。"""

        logger.error(
            "Completion failed after retries",
            extra={"extra": {**log_ctx, "attempts": attempts, "error": error.message}},
        )
        return Failure.from_error(error, attempts=attempts)

    def _validate(self, req: CompletionRequest) -> None:
        if not self._config.api_key:
            # 配置缺失走 ValidationError，不发请求
            raise ValidationError(code="MISSING_API_KEY", message="GEMINI_API_KEY not set")
        if not req.history:
            raise ValidationError(code="EMPTY_HISTORY", message="Completion history must not be empty")

    def _build_payload(self, req: CompletionRequest) -> Dict[str, Any]:
        """将 CompletionRequest 转成 generateContent 所需的请求 JSON。"""

        return {
            "contents": [self._message_to_payload(m) for m in req.history],
            "systemInstruction": {"parts": [{"text": req.system_instruction}]},
        }

    @staticmethod
    def _message_to_payload(message: Message) -> Dict[str, Any]:
        return {"role": to_provider_role(message.role), "parts": [{"text": message.text}]}

    async def _post(self, client: httpx.AsyncClient, payload: Dict[str, Any]) -> httpx.Response:
        """发送一次请求，网络错误与非 2xx 状态转换为可重试异常。"""

        try:
            resp = await client.post(
                self._config.endpoint,
                params={"key": self._config.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时等
            raise NetworkError(code="NETWORK_ERROR", message=str(e) or type(e).__name__)
        status = resp.status_code
        if status == 429:
            raise RateLimitError(
                code="RATE_LIMIT",
                message=self._status_message(resp),
                http_status=status,
            )
        if status < 200 or status >= 300:
            raise ApiError(code="API_ERROR", message=self._status_message(resp), http_status=status)
        return resp

    def _parse_response(self, resp: httpx.Response) -> str:
        """从 2xx 响应中取出 candidates[0].content.parts[0].text。"""

        try:
            data = resp.json()
        except ValueError:
            raise MalformedResponseError(
                code="MALFORMED_RESPONSE",
                message=DEFAULT_MALFORMED_MESSAGE,
                http_status=resp.status_code,
            )
        text = None
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            pass
        if not isinstance(text, str) or not text:
            raise MalformedResponseError(
                code="MALFORMED_RESPONSE",
                message=self._provider_error(data) or DEFAULT_MALFORMED_MESSAGE,
                http_status=resp.status_code,
            )
        return text

    def _status_message(self, resp: httpx.Response) -> str:
        message = f"API call failed with status: {resp.status_code}"
        try:
            detail = self._provider_error(resp.json())
        except ValueError:
            detail = None
        if detail:
            message = f"{message} ({detail})"
        return message

    @staticmethod
    def _provider_error(data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return None

    @staticmethod
    def _log_info(message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        logger.info(message, extra={"extra": {**log_ctx, **fields}})

    @staticmethod
    def _log_warning(message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        logger.warning(message, extra={"extra": {**log_ctx, **fields}})
