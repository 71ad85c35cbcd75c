# ffmedia/common/settings.py
from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FFProbeConfig(BaseModel):
    bin: str = "ffprobe"  # bare name -> resolved through PATH
    timeout_sec: float = Field(30.0, gt=0)


class FFmpegConfig(BaseModel):
    bin: str = "ffmpeg"
    timeout_sec: float = Field(600.0, gt=0)


class ProcessConfig(BaseModel):
    # how long to wait for a killed process to be reaped before giving up on it
    kill_grace_sec: float = Field(5.0, ge=0)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "ffmedia"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"

    # -------- Sub-configs --------
    ffprobe: FFProbeConfig = FFProbeConfig()
    ffmpeg: FFmpegConfig = FFmpegConfig()
    process: ProcessConfig = ProcessConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return str(v).strip().upper() if v is not None else "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from ffmedia.common.settings import get_settings
        cfg = get_settings()

    Binary overrides come from the environment, e.g. FFPROBE__BIN=/opt/ffmpeg/bin/ffprobe.
    """
    return Settings()  # pydantic_settings will read from .env automatically
