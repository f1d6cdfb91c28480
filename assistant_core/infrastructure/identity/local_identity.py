"""本地身份提供方。

启动时登录一次：配置了预签发的用户标识则直接使用，否则匿名登录。
无论登录是否成功，结束后都标记为 ready，由调用方根据 subject 是否为空判断可用性。
"""

from typing import Optional
from uuid import uuid4

from assistant_core.domain.scheduling import IdentityProvider
from assistant_core.infrastructure.logging.logger import logger


class LocalIdentityProvider(IdentityProvider):
    def __init__(self, custom_subject: Optional[str] = None):
        self._custom_subject = custom_subject
        self._subject_id: Optional[str] = None
        self.is_ready = False

    def get_current_subject_id(self) -> Optional[str]:
        return self._subject_id

    async def sign_in(self) -> Optional[str]:
        try:
            if self._custom_subject is not None:
                subject = self._custom_subject.strip()
                if not subject:
                    raise ValueError("custom subject is empty")
                self._subject_id = subject
                mode = "custom"
            else:
                self._subject_id = f"anon-{uuid4().hex}"
                mode = "anonymous"
            logger.info("Signed in", extra={"extra": {"mode": mode}})
        except ValueError as e:
            self._subject_id = None
            logger.error(f"Sign-in failed: {e}", extra={"extra": {"error": str(e)}})
        finally:
            self.is_ready = True
        return self._subject_id

    def sign_out(self) -> None:
        self._subject_id = None
