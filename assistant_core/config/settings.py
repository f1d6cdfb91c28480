"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。
进程启动后配置只读，各客户端通过 CompletionConfig 等不可变对象获取所需字段。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("ASSISTANT_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """全局配置（使用 Pydantic）。"""

    # ---- Gemini 生成接口 ----
    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API 密钥")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini API 基础URL",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash-preview-09-2025",
        description="generateContent 使用的模型 ID",
    )

    # ---- 重试与退避 ----
    max_retries: int = Field(default=5, ge=1, le=10, description="单次补全的最大尝试次数")
    backoff_base_ms: int = Field(default=1000, gt=0, description="退避基数（毫秒）")
    backoff_factor: float = Field(default=2.0, gt=1.0, description="退避倍数")
    backoff_jitter_ms: int = Field(default=0, ge=0, description="随机抖动上限（毫秒），0 表示不抖动")
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")

    # ---- 文档存储与身份 ----
    app_id: str = Field(default="default-amora-app-id", description="文档存储中的应用 ID")
    storage_root: str = Field(default=".storage", description="本地文档存储根目录")
    identity_custom_subject: Optional[str] = Field(
        default=None,
        description="预先签发的用户标识；为空时匿名登录",
    )

    # ---- 日志与提示词 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")
    prompt_locale: str = Field(default="en", description="系统提示词语言目录")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("gemini_api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = Settings()
