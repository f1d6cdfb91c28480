"""LLM Provider 集成层。

该包下的模块负责：
- 定义补全客户端抽象接口 (base)。
- 维护补全接口的不可变配置 (registry)。
- 提供具体实现 (gemini_client)。
"""

from typing import Optional

from assistant_core.config.settings import settings
from assistant_core.providers.base import CompletionBackend
from assistant_core.providers.gemini_client import GeminiClient
from assistant_core.providers.registry import CompletionConfig


def create_provider(config: Optional[CompletionConfig] = None) -> CompletionBackend:
    """创建补全客户端实例，未传入配置时从全局 settings 构造一次。"""

    return GeminiClient(config or CompletionConfig.from_settings(settings))
