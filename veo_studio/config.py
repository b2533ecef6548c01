from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

SAMPLE_VIDEO_URL = "https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/BigBuckBunny.mp4"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_host: str = Field("127.0.0.1")
    app_port: int = Field(8000)
    log_level: str = Field("INFO")

    prompt_char_limit: int = Field(2000, gt=0)
    default_prompt: str = Field("A cinematic nature scene")

    provider_tag: str = Field("veo3-mock")
    ready_after_ms: int = Field(3000, ge=0)
    mock_video_url: str = Field(SAMPLE_VIDEO_URL)

    api_base_url: str = Field("http://127.0.0.1:8000")
    poll_max_attempts: int = Field(40, ge=1)
    poll_interval_ms: int = Field(2000, ge=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        value = value or "INFO"
        return str(value).strip().upper()

    @field_validator("api_base_url", mode="before")
    @classmethod
    def normalize_base_url(cls, value: str) -> str:
        value = value or "http://127.0.0.1:8000"
        return str(value).strip().rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    try:
        return Settings()
    except Exception as exc:
        raise RuntimeError("Failed to load application settings. Check your .env file and environment.") from exc


settings = get_settings()
