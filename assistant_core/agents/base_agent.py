"""会话核心模块。

ConversationSession 维护一次聊天交互的有序对话记录，并保证同一时刻
最多只有一个补全请求在进行，避免打乱轮次顺序。
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4
import logging
import time

from assistant_core.domain.exceptions import SessionBusyError
from assistant_core.domain.models import CompletionRequest, Failure, Message, Success
from assistant_core.providers.base import CompletionBackend
from assistant_core.infrastructure.logging.logger import logger


UNAVAILABLE_PLACEHOLDER = "I apologize, but I am currently unable to connect to our AI services."


@dataclass(frozen=True)
class TurnResult:
    """一轮对话的结果。

    - message: 追加到对话记录中的助手消息（成功时为回复，失败时为占位提示）。
    - error: 失败时的 Failure，与对话记录分开返回，供 UI 单独展示错误提示。
    """

    message: Message
    error: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ConversationSession:
    """一次聊天交互的会话，随 UI 打开创建、关闭销毁，不做持久化。"""

    def __init__(
        self,
        backend: CompletionBackend,
        system_instruction: str,
        greeting: Optional[str] = None,
        agent_type: str = "chat",
    ):
        self._backend = backend
        self._system_instruction = system_instruction
        self._agent_type = agent_type
        self._session_id = f"s-{uuid4().hex}"
        self._messages: list[Message] = []
        if greeting:
            self._messages.append(Message(role="assistant", text=greeting))
        self._busy = False
        self.last_error: Optional[Failure] = None

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def system_instruction(self) -> str:
        return self._system_instruction

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def busy(self) -> bool:
        return self._busy

    async def append_and_complete(self, user_text: str) -> Optional[TurnResult]:
        """追加一条用户消息并获取助手回复。

        Args:
            user_text: 用户输入，空白输入直接忽略（返回 None，不发请求）。

        Returns:
            TurnResult；成功与失败都会向对话记录追加一条助手消息。

        Raises:
            SessionBusyError: 上一轮补全尚未结束。
        """

        if not user_text or not user_text.strip():
            return None
        log_ctx: Dict[str, Any] = {
            "session_id": self._session_id,
            "agent_type": self._agent_type,
        }
        if self._busy:
            self._log(logging.WARNING, "Rejected input while completion in flight", log_ctx)
            raise SessionBusyError()

        self._busy = True
        start_time = time.time()
        try:
            user_msg = Message(role="user", text=user_text)
            self._messages.append(user_msg)
            req = CompletionRequest(history=list(self._messages), system_instruction=self._system_instruction)
            try:
                outcome = await self._backend.complete(req)
            except BaseException:
                # 取消或意外异常：撤回本轮用户消息，保持对话记录完整
                self._messages.pop()
                raise

            if isinstance(outcome, Success):
                reply = Message(role="assistant", text=outcome.text)
                self._messages.append(reply)
                self.last_error = None
                result = TurnResult(message=reply)
            else:
                placeholder = Message(role="assistant", text=UNAVAILABLE_PLACEHOLDER)
                self._messages.append(placeholder)
                self.last_error = outcome
                result = TurnResult(message=placeholder, error=outcome)
                self._log(
                    logging.WARNING,
                    "Completion failed, placeholder appended",
                    log_ctx,
                    kind=outcome.kind,
                    error=outcome.message,
                )
        finally:
            self._busy = False

        self._log(
            logging.INFO,
            "Completed session turn",
            log_ctx,
            ok=result.ok,
            elapsed_seconds=round(time.time() - start_time, 2),
            history_length=len(self._messages),
        )
        return result

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
