"""对外 API 服务模块。

提供简化的异步函数接口供站点后端调用：聊天组件、方案生成器与预约表单。
补全客户端、文档存储与身份提供方在进程内共享，均为惰性单例。
"""

from typing import Any, Dict, List, Optional

from assistant_core.agents.sales_agent import SalesAssistant
from assistant_core.agents.solution_agent import SolutionGenerator
from assistant_core.config.settings import settings
from assistant_core.domain.exceptions import SessionBusyError
from assistant_core.domain.models import CompletionOutcome
from assistant_core.domain.scheduling import DocumentStore
from assistant_core.infrastructure.identity.local_identity import LocalIdentityProvider
from assistant_core.infrastructure.logging.logger import logger
from assistant_core.infrastructure.storage.json_store import JsonDocumentStore
from assistant_core.providers import create_provider
from assistant_core.providers.base import CompletionBackend
from assistant_core.scheduling.service import SchedulingService


_backend: Optional[CompletionBackend] = None
_store: Optional[DocumentStore] = None
_identity: Optional[LocalIdentityProvider] = None


def get_default_backend() -> CompletionBackend:
    """获取默认的补全客户端（单例）。"""
    global _backend
    if _backend is None:
        _backend = create_provider()
    return _backend


async def get_default_identity() -> LocalIdentityProvider:
    """获取默认身份提供方，首次调用时完成登录。"""
    global _identity
    if _identity is None:
        _identity = LocalIdentityProvider(custom_subject=settings.identity_custom_subject)
        await _identity.sign_in()
    return _identity


def get_default_store() -> DocumentStore:
    global _store
    if _store is None:
        _store = JsonDocumentStore(root=settings.storage_root)
    return _store


def open_sales_chat() -> SalesAssistant:
    """打开聊天窗口时调用，返回一个新的销售助手会话。"""
    return SalesAssistant(get_default_backend())


async def send_chat_message(chat: SalesAssistant, user_input: str) -> Optional[Dict[str, Any]]:
    """发送一条聊天消息。

    Returns:
        包含助手回复、错误信息与完整对话记录的字典；空白输入返回 None。

    Raises:
        SessionBusyError: 上一条消息仍在处理中。
    """
    try:
        result = await chat.send(user_input)
    except SessionBusyError as e:
        logger.warning(f"Chat input rejected: {e}", extra={"extra": {
            "session_id": chat.session.session_id,
            "code": e.code,
        }})
        raise
    except Exception as e:
        logger.error(f"Chat failed: {e}", extra={"extra": {
            "session_id": chat.session.session_id,
            "error": str(e),
        }})
        raise
    if result is None:
        return None
    return {
        "session_id": chat.session.session_id,
        "reply": result.message.text,
        "error": None if result.error is None else {
            "kind": result.error.kind,
            "message": result.error.message,
        },
        "messages": [{"role": m.role, "text": m.text} for m in chat.messages],
    }


async def generate_solution(industry: str, challenge: str) -> CompletionOutcome:
    """方案生成器入口，每次调用都是独立请求。"""
    generator = SolutionGenerator(get_default_backend())
    return await generator.generate(industry, challenge)


async def submit_scheduling_request(request_type: str, preferred_slots: List[str]) -> Dict[str, Any]:
    """提交预约表单。

    Raises:
        ValidationError: 身份未就绪或未填写候选时间。
        StoreError: 写入失败。
    """
    identity = await get_default_identity()
    service = SchedulingService(get_default_store(), identity, app_id=settings.app_id)
    try:
        record = await service.submit(request_type, preferred_slots)
    except Exception as e:
        logger.error(f"Scheduling submit failed: {e}", extra={"extra": {
            "request_type": request_type,
            "error": str(e),
        }})
        raise
    return record.to_document()
