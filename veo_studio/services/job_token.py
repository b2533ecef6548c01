"""Stateless job identifiers.

A job id is the whole job: the payload below serialized to compact JSON and
encoded as unpadded URL-safe base64. Nothing is stored server-side, so status
checks only need the id and the current time. Tokens are readable and not
signed.
"""
import base64
import json
import logging
import time
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from veo_studio.models.schemas import AspectRatio

logger = logging.getLogger(__name__)

TOKEN_VERSION = 1
SUPPORTED_VERSIONS = frozenset({1})


class InvalidTokenError(ValueError):
    """Raised when a job id cannot be decoded into a job payload."""


class JobPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    # Tokens minted before versioning carry no "v" and are read as version 1.
    version: int = Field(TOKEN_VERSION, alias="v")
    provider: str
    created_at: int = Field(..., alias="createdAt")
    ready_after_ms: int = Field(..., alias="readyAfterMs", ge=0)
    url: str
    duration_seconds: int = Field(..., alias="durationSeconds")
    aspect_ratio: AspectRatio = Field(..., alias="aspectRatio")
    prompt: str


def now_ms() -> int:
    return int(time.time() * 1000)


def encode_job_token(payload: JobPayload) -> str:
    raw = json.dumps(payload.model_dump(by_alias=True), separators=(",", ":"), ensure_ascii=False)
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_job_token(token: str) -> JobPayload:
    if not token or not isinstance(token, str):
        raise InvalidTokenError("Job id is empty")

    token = token.strip()
    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        data = json.loads(raw.decode("utf-8"))
    except (ValueError, TypeError) as exc:
        raise InvalidTokenError("Job id is not a valid token") from exc

    if not isinstance(data, dict):
        raise InvalidTokenError("Job id does not encode a job payload")

    try:
        payload = JobPayload.model_validate(data)
    except ValueError as exc:
        raise InvalidTokenError("Job id is missing required job fields") from exc

    if payload.version not in SUPPORTED_VERSIONS:
        raise InvalidTokenError(f"Unsupported job token version {payload.version}")
    return payload


def is_ready(payload: JobPayload, current_ms: Optional[int] = None) -> bool:
    current_ms = now_ms() if current_ms is None else current_ms
    return current_ms - payload.created_at >= payload.ready_after_ms


def job_status(token: str, payload: JobPayload, current_ms: Optional[int] = None) -> Dict[str, Union[str, int]]:
    if not is_ready(payload, current_ms):
        return {"id": token, "status": "processing"}

    return {
        "id": token,
        "status": "completed",
        "url": payload.url,
        "durationSeconds": payload.duration_seconds,
        "aspectRatio": payload.aspect_ratio,
        "provider": payload.provider,
    }
