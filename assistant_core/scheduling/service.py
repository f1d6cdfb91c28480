"""预约请求提交服务。

表单提交后构造 SchedulingRequest 并写入公共集合，供销售团队后续处理。
本系统只写不读。
"""

from typing import Iterable, List

from assistant_core.domain.exceptions import ValidationError
from assistant_core.domain.scheduling import DocumentStore, IdentityProvider, SchedulingRequest
from assistant_core.infrastructure.logging.logger import logger


NOT_READY_MESSAGE = "System not ready. Please wait a moment and try again."
NO_SLOTS_MESSAGE = "Please suggest at least one preferred date and time."


def collection_path_for(app_id: str) -> str:
    return f"/artifacts/{app_id}/public/data/demoRequests"


class SchedulingService:
    def __init__(self, store: DocumentStore, identity: IdentityProvider, app_id: str):
        self._store = store
        self._identity = identity
        self._collection_path = collection_path_for(app_id)

    @property
    def collection_path(self) -> str:
        return self._collection_path

    async def submit(self, request_type: str, preferred_slots: Iterable[str]) -> SchedulingRequest:
        """提交一次预约请求。

        Args:
            request_type: 请求类型，如 "Demo Request"。
            preferred_slots: 用户填写的候选时间，空白项会被忽略。

        Returns:
            已写入存储的 SchedulingRequest。

        Raises:
            ValidationError: 身份未就绪或没有有效的候选时间。
            StoreError: 文档存储写入失败。
        """

        subject_id = self._identity.get_current_subject_id() if self._identity.is_ready else None
        if not subject_id:
            raise ValidationError(code="SYSTEM_NOT_READY", message=NOT_READY_MESSAGE)
        slots: List[str] = [s.strip() for s in preferred_slots if s and s.strip()]
        if not slots:
            raise ValidationError(code="NO_PREFERRED_SLOTS", message=NO_SLOTS_MESSAGE)

        record = SchedulingRequest(
            subject_id=subject_id,
            request_type=request_type,
            preferred_slots=slots,
        )
        await self._store.append(self._collection_path, record)
        logger.info(
            "Scheduling request submitted",
            extra={"extra": {"request_type": request_type, "slot_count": len(slots)}},
        )
        return record
