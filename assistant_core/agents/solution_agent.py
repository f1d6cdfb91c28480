"""方案创意生成器。

一次性请求：每次调用都是独立的 CompletionRequest，不保留历史。
"""

from typing import Optional

from assistant_core.config.settings import settings
from assistant_core.domain.exceptions import ValidationError
from assistant_core.domain.models import CompletionOutcome, CompletionRequest, Failure, Message
from assistant_core.infrastructure.logging.logger import logger
from assistant_core.prompts import load_system_prompt, render_solution_request
from assistant_core.providers.base import CompletionBackend


MISSING_FIELDS_MESSAGE = "Please fill in both the industry and the challenge."


class SolutionGenerator:
    agent_type = "solution-strategist"

    def __init__(self, backend: CompletionBackend, locale: Optional[str] = None):
        self._backend = backend
        self._locale = locale or getattr(settings, "prompt_locale", "en")
        self._system_instruction = load_system_prompt(self.agent_type, self._locale)

    async def generate(self, industry: str, challenge: str) -> CompletionOutcome:
        """根据行业与挑战生成一段 AI 方案建议。

        两个字段任一为空时直接返回 validation 失败，不发网络请求。
        """

        industry = (industry or "").strip()
        challenge = (challenge or "").strip()
        if not industry or not challenge:
            err = ValidationError(code="MISSING_FIELDS", message=MISSING_FIELDS_MESSAGE)
            logger.warning(
                "Solution request rejected",
                extra={"extra": {"agent_type": self.agent_type, "code": err.code}},
            )
            return Failure.from_error(err)

        prompt = render_solution_request(industry, challenge, self._locale)
        req = CompletionRequest(
            history=[Message(role="user", text=prompt)],
            system_instruction=self._system_instruction,
        )
        outcome = await self._backend.complete(req)
        logger.info(
            "Solution generated" if outcome.ok else "Solution generation failed",
            extra={"extra": {"agent_type": self.agent_type, "ok": outcome.ok, "attempts": outcome.attempts}},
        )
        return outcome
