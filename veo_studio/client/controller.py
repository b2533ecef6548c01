"""Async client that drives the chat and generation endpoints.

The controller keeps the state a UI would render: the current request
parameters, the chat log, the latest job id and the video URL once ready.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from veo_studio.config import settings
from veo_studio.models.schemas import ChatMessage, CommandResponse
from veo_studio.services.command_parser import DEFAULT_ASPECT_RATIO, DEFAULT_DURATION_SECONDS

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


def open_client(base_url: Optional[str] = None, timeout: float = 30.0) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url or settings.api_base_url, timeout=timeout)


class VideoStudioController:
    def __init__(
        self,
        client: httpx.AsyncClient,
        max_attempts: Optional[int] = None,
        interval_ms: Optional[int] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self._client = client
        self._sleep = sleep
        self.max_attempts = max_attempts if max_attempts is not None else settings.poll_max_attempts
        self.interval_ms = interval_ms if interval_ms is not None else settings.poll_interval_ms

        self.prompt = ""
        self.duration_seconds = DEFAULT_DURATION_SECONDS
        self.aspect_ratio = DEFAULT_ASPECT_RATIO
        self.messages: List[ChatMessage] = []
        self.job_id: Optional[str] = None
        self.video_url: Optional[str] = None
        self.is_loading = False

        # Bumped by every generate() call; older poll loops stop once it moves on.
        self._epoch = 0

    @property
    def epoch(self) -> int:
        return self._epoch

    def request_body(self) -> Dict[str, Any]:
        return {
            "prompt": self.prompt,
            "durationSeconds": self.duration_seconds,
            "aspectRatio": self.aspect_ratio,
        }

    async def generate(self) -> Optional[str]:
        """Start a generation with the current parameters and wait for its URL.

        Returns the video URL, or ``None`` when the request failed, polling
        gave up, or a newer generation took over.
        """
        self._epoch += 1
        epoch = self._epoch
        self.is_loading = True
        self.video_url = None
        try:
            response = await self._client.post("/api/generate", json=self.request_body())
            response.raise_for_status()
            data = response.json()
            if epoch != self._epoch:
                return None
            if not isinstance(data, dict):
                logger.warning("Generation request returned an unexpected body")
                return None

            self.job_id = data.get("id")
            if data.get("url"):
                self.video_url = data["url"]
            elif self.job_id:
                await self.poll_status(self.job_id, epoch)
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to start generation")
        finally:
            if epoch == self._epoch:
                self.is_loading = False

        return self.video_url if epoch == self._epoch else None

    async def poll_status(self, job_id: str, epoch: Optional[int] = None) -> Optional[str]:
        epoch = self._epoch if epoch is None else epoch
        for attempt in range(self.max_attempts):
            if epoch != self._epoch:
                logger.info("Stopped polling job after %s attempts: superseded by a newer generation", attempt)
                return None

            try:
                response = await self._client.get("/api/generate", params={"id": job_id})
            except httpx.HTTPError:
                logger.exception("Status check failed for job on attempt %s", attempt + 1)
                return None

            if response.is_success:
                try:
                    data = response.json()
                except ValueError:
                    logger.exception("Status check returned an unreadable body on attempt %s", attempt + 1)
                    return None
                if isinstance(data, dict) and data.get("status") == "completed" and data.get("url"):
                    if epoch != self._epoch:
                        return None
                    self.video_url = data["url"]
                    logger.info("Video ready after %s attempts: %s", attempt + 1, self.video_url)
                    return self.video_url
            else:
                logger.debug("Status check returned HTTP %s", response.status_code)

            if attempt + 1 < self.max_attempts:
                await self._sleep(self.interval_ms / 1000)

        logger.warning("Gave up waiting for video after %s attempts", self.max_attempts)
        return None

    async def submit_chat(self, text: str) -> Optional[CommandResponse]:
        text = (text or "").strip()
        if not text:
            return None

        self.messages.append(ChatMessage(role="user", content=text))
        try:
            response = await self._client.post("/api/command", json={"message": text})
        except httpx.HTTPError:
            logger.exception("Failed to send chat command")
            return None

        if not response.is_success:
            logger.warning("Chat command rejected with HTTP %s", response.status_code)
            return None

        try:
            command = CommandResponse.model_validate(response.json())
        except ValueError:
            logger.exception("Chat command returned an unreadable reply")
            return None

        self.messages.append(ChatMessage(role="assistant", content=command.reply))
        self.prompt = command.prompt
        self.duration_seconds = command.duration_seconds
        self.aspect_ratio = command.aspect_ratio
        return command
