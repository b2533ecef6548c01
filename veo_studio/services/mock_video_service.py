import logging
from typing import Dict, Optional, Union

from veo_studio.config import settings
from veo_studio.models.schemas import VideoRequest
from veo_studio.services.job_token import (
    JobPayload,
    decode_job_token,
    encode_job_token,
    job_status,
    now_ms,
)

logger = logging.getLogger(__name__)


def start_video_job(request: VideoRequest, current_ms: Optional[int] = None) -> Dict[str, str]:
    created_at = now_ms() if current_ms is None else current_ms
    payload = JobPayload(
        provider=settings.provider_tag,
        created_at=created_at,
        ready_after_ms=settings.ready_after_ms,
        url=settings.mock_video_url,
        duration_seconds=request.duration_seconds,
        aspect_ratio=request.aspect_ratio,
        prompt=request.prompt,
    )
    job_id = encode_job_token(payload)
    logger.info(
        "Started %s job: duration=%ss aspect=%s ready_after=%sms",
        payload.provider,
        payload.duration_seconds,
        payload.aspect_ratio,
        payload.ready_after_ms,
    )
    return {"id": job_id, "status": "processing"}


def get_job_status(job_id: str, current_ms: Optional[int] = None) -> Dict[str, Union[str, int]]:
    payload = decode_job_token(job_id)
    status = job_status(job_id, payload, current_ms)
    logger.debug("Job status for %s job created at %s: %s", payload.provider, payload.created_at, status["status"])
    return status
