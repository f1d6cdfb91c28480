"""补全接口的不可变配置。

接口地址、密钥与重试上限属于进程级常量：启动时从 Settings 读取一次，
构造成 CompletionConfig 传给客户端，之后不再变化。客户端本身不读取全局配置。
"""

from dataclasses import dataclass
from typing import Optional


GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash-preview-09-2025"
MAX_RETRIES = 5


@dataclass(frozen=True)
class CompletionConfig:
    """单个补全接口的配置。"""

    api_key: Optional[str]
    base_url: str = GEMINI_BASE_URL
    model: str = GEMINI_DEFAULT_MODEL
    max_retries: int = MAX_RETRIES
    backoff_base_ms: int = 1000
    backoff_factor: float = 2.0
    backoff_jitter_ms: int = 0
    http_timeout: float = 30.0

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        if self.backoff_factor <= 1:
            raise ValueError("backoff_factor must be > 1")
        if self.backoff_base_ms <= 0:
            raise ValueError("backoff_base_ms must be > 0")
        # 抖动不能超过相邻两次退避的最小差值，保证等待时间严格递增
        if self.backoff_jitter_ms > self.backoff_base_ms * (self.backoff_factor - 1):
            raise ValueError("backoff_jitter_ms too large for strictly increasing backoff")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    def backoff_seconds(self, attempt: int, jitter: float = 0.0) -> float:
        """第 attempt 次（从 0 开始）失败后的等待秒数。

        jitter 为 [0, 1) 的随机数，按 backoff_jitter_ms 缩放。
        """

        delay_ms = self.backoff_base_ms * (self.backoff_factor ** attempt)
        delay_ms += self.backoff_jitter_ms * jitter
        return delay_ms / 1000.0

    @classmethod
    def from_settings(cls, settings) -> "CompletionConfig":
        return cls(
            api_key=getattr(settings, "gemini_api_key", None),
            base_url=getattr(settings, "gemini_base_url", None) or GEMINI_BASE_URL,
            model=getattr(settings, "gemini_model", None) or GEMINI_DEFAULT_MODEL,
            max_retries=getattr(settings, "max_retries", MAX_RETRIES),
            backoff_base_ms=getattr(settings, "backoff_base_ms", 1000),
            backoff_factor=getattr(settings, "backoff_factor", 2.0),
            backoff_jitter_ms=getattr(settings, "backoff_jitter_ms", 0),
            http_timeout=getattr(settings, "http_timeout", 30.0),
        )
