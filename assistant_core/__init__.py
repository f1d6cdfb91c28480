"""Assistant Core 顶层包。

该包提供营销站点背后的销售助手聊天、方案创意生成与预约提交能力，
包括配置加载、领域模型、带退避重试的补全客户端、会话状态管理与外部协作方适配。
"""

from assistant_core.agents.base_agent import ConversationSession, TurnResult
from assistant_core.agents.solution_agent import SolutionGenerator
from assistant_core.providers.gemini_client import GeminiClient
from assistant_core.providers.registry import CompletionConfig

__all__ = ["CompletionConfig", "ConversationSession", "GeminiClient", "SolutionGenerator", "TurnResult"]
