import math
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from veo_studio.config import settings
from veo_studio.services.command_parser import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_DURATION_SECONDS,
    PORTRAIT,
    snap_duration,
)

AspectRatio = Literal["16:9", "9:16"]
JobStatus = Literal["processing", "completed"]


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class VideoRequest(ApiModel):
    prompt: str = Field("", description="Text prompt for the video")
    duration_seconds: int = Field(DEFAULT_DURATION_SECONDS, alias="durationSeconds")
    aspect_ratio: AspectRatio = Field(DEFAULT_ASPECT_RATIO, alias="aspectRatio")

    @field_validator("prompt", mode="before")
    @classmethod
    def truncate_prompt(cls, value: Any) -> str:
        text = "" if value is None else str(value)
        return text[: settings.prompt_char_limit]

    @field_validator("duration_seconds", mode="before")
    @classmethod
    def coerce_duration(cls, value: Any) -> Any:
        if value is None:
            return DEFAULT_DURATION_SECONDS
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                return value
        # Fractional seconds snap like whole ones; anything else is left to int validation.
        if isinstance(value, float) and math.isfinite(value):
            return snap_duration(value)
        return value

    @field_validator("duration_seconds")
    @classmethod
    def snap_to_allowed(cls, value: int) -> int:
        return snap_duration(value)

    @field_validator("aspect_ratio", mode="before")
    @classmethod
    def coerce_aspect(cls, value: Any) -> str:
        return PORTRAIT if value == PORTRAIT else DEFAULT_ASPECT_RATIO


class CommandRequest(ApiModel):
    message: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def coerce_message(cls, value: Any) -> str:
        return "" if value is None else str(value)


class CommandResponse(ApiModel):
    reply: str
    prompt: str
    duration_seconds: int = Field(..., alias="durationSeconds")
    aspect_ratio: AspectRatio = Field(..., alias="aspectRatio")


class VideoJobResponse(ApiModel):
    id: str
    status: JobStatus
    url: Optional[str] = None


class JobStatusResponse(ApiModel):
    id: str
    status: JobStatus
    url: Optional[str] = None
    duration_seconds: Optional[int] = Field(default=None, alias="durationSeconds")
    aspect_ratio: Optional[AspectRatio] = Field(default=None, alias="aspectRatio")
    provider: Optional[str] = None


class ChatMessage(ApiModel):
    role: Literal["user", "assistant"]
    content: str
