import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")
    TEXT_MODEL: str = "gemini-2.5-flash"
    SPEECH_MODEL: str = "gemini-2.5-flash-preview-tts"
    SPEECH_VOICE: str = "Kore"

    MAX_RETRIES: int = 3
    RETRY_BASE_DELAY_SECONDS: float = 1.0
    RETRY_JITTER_RATIO: float = 0.25
    ATTEMPT_TIMEOUT_SECONDS: float = 60.0
    # Sent to clients as Retry-After once the upstream rate limit outlasts our retries.
    RATE_LIMIT_RETRY_AFTER_SECONDS: int = 60

    FALLBACK_LANGUAGE: str = "en"
    # 2 decimal places is roughly 1 km, close enough to share advice.
    COORDINATE_PRECISION: int = 2

    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("FALLBACK_LANGUAGE")
    @classmethod
    def lower_language_code(cls, value: str) -> str:
        return value.strip().lower()


settings = Settings()
