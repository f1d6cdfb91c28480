"""销售助手 Nova 的专用包装。

自动配置销售资格审查的系统提示词与开场白。
"""

from typing import Optional, Tuple

from assistant_core.agents.base_agent import ConversationSession, TurnResult
from assistant_core.config.settings import settings
from assistant_core.domain.models import Failure, Message
from assistant_core.prompts import load_greeting, load_system_prompt
from assistant_core.providers.base import CompletionBackend


class SalesAssistant:
    """销售聊天组件背后的会话包装类。

    每次打开聊天窗口创建一个实例，对话记录以 Nova 的开场白开始。
    """

    agent_type = "sales-assistant"

    def __init__(self, backend: CompletionBackend, locale: Optional[str] = None):
        locale = locale or getattr(settings, "prompt_locale", "en")
        self._session = ConversationSession(
            backend=backend,
            system_instruction=load_system_prompt(self.agent_type, locale),
            greeting=load_greeting(locale),
            agent_type=self.agent_type,
        )

    @property
    def session(self) -> ConversationSession:
        return self._session

    @property
    def messages(self) -> Tuple[Message, ...]:
        return self._session.messages

    @property
    def last_error(self) -> Optional[Failure]:
        return self._session.last_error

    async def send(self, user_text: str) -> Optional[TurnResult]:
        return await self._session.append_and_complete(user_text)
