import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from veo_studio.models.schemas import (
    CommandRequest,
    CommandResponse,
    JobStatusResponse,
    VideoJobResponse,
    VideoRequest,
)
from veo_studio.services import mock_video_service
from veo_studio.services.command_parser import parse_command
from veo_studio.services.job_token import InvalidTokenError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/command", response_model=CommandResponse)
@router.post("/chat", response_model=CommandResponse, include_in_schema=False)
def parse_chat_command(payload: CommandRequest):
    parsed = parse_command(payload.message)
    return CommandResponse(
        reply=parsed.reply,
        prompt=parsed.prompt,
        duration_seconds=parsed.duration_seconds,
        aspect_ratio=parsed.aspect_ratio,
    )


@router.post("/generate", response_model=VideoJobResponse, response_model_exclude_none=True)
def generate_video(payload: VideoRequest):
    if not payload.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt cannot be empty.")

    job = mock_video_service.start_video_job(payload)
    return VideoJobResponse(**job)


@router.get("/generate", response_model=JobStatusResponse, response_model_exclude_none=True)
def get_video_status(job_id: Optional[str] = Query(default=None, alias="id")):
    if not job_id:
        raise HTTPException(status_code=400, detail="Missing id")

    try:
        job_status = mock_video_service.get_job_status(job_id)
    except InvalidTokenError as exc:
        logger.warning("Rejected job id: %s", exc)
        raise HTTPException(status_code=400, detail="Invalid id") from exc

    return JobStatusResponse(**job_status)


@router.get("/health")
def health_check():
    return {"status": "ok"}
