from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class SchedulingRequest:
    """预约请求记录，提交后交给外部文档存储，系统不再读取。"""

    subject_id: str
    request_type: str
    preferred_slots: List[str]
    status: str = "Pending Review"
    created_at: str = field(default_factory=_utc_now_iso)

    def to_document(self) -> Dict[str, Any]:
        # 字段名与站点既有集合保持一致
        return {
            "userId": self.subject_id,
            "requestType": self.request_type,
            "status": self.status,
            "preferredSlots": list(self.preferred_slots),
            "timestamp": self.created_at,
        }


class DocumentStore(Protocol):
    async def append(self, collection_path: str, record: SchedulingRequest) -> None:
        ...


class IdentityProvider(Protocol):
    is_ready: bool

    def get_current_subject_id(self) -> Optional[str]:
        ...
