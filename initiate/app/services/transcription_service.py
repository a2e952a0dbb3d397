import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from initiate.app.config.settings import Settings
from initiate.app.models.domain.error import (
    InvalidAudioError,
    MissingCredentialError,
    TranscriptionUpstreamError,
)
from initiate.app.utils.audio import (
    AUDIO_FORMAT_CANDIDATES,
    detect_audio_container,
    hex_preview,
)

logger = logging.getLogger(__name__)


class Transcription(BaseModel):
    text: str
    # Not measured; the upstream service reports no confidence.
    confidence: float


class TranscriptionService:
    """
    Speech-to-text against an OpenAI-compatible transcription endpoint.

    The caller's declared format is not trusted, so the audio is posted once
    per candidate MIME type until the endpoint accepts it.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.TRANSCRIPTION_API_KEY
        self.model = settings.TRANSCRIPTION_MODEL
        self.url = settings.TRANSCRIPTION_URL
        self.min_audio_bytes = settings.TRANSCRIPTION_MIN_AUDIO_BYTES
        self.default_confidence = settings.TRANSCRIPTION_DEFAULT_CONFIDENCE
        self.timeout = settings.httpx_timeout
        self.transport = transport

    def validate_audio(self, audio: bytes) -> None:
        if not audio:
            raise InvalidAudioError("Audio data is empty")
        if len(audio) < self.min_audio_bytes:
            raise InvalidAudioError(
                f"Audio data is too small ({len(audio)} bytes). "
                f"Minimum expected: {self.min_audio_bytes} bytes"
            )

    async def transcribe(self, audio: bytes, declared_format: str = "") -> Transcription:
        self.validate_audio(audio)
        if not self.api_key:
            raise MissingCredentialError("TRANSCRIPTION_API_KEY")

        container = detect_audio_container(audio)
        if container is None:
            logger.warning(
                f"Unrecognised audio header (declared {declared_format!r}), "
                f"first 32 bytes: {hex_preview(audio)}"
            )
        else:
            logger.info(
                f"Audio looks like {container} (declared {declared_format!r}), "
                f"{len(audio)} bytes"
            )

        headers = {"Authorization": f"Bearer {self.api_key}"}
        data = {"model": self.model, "response_format": "json"}
        last_error = "no format attempted"

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            for candidate in AUDIO_FORMAT_CANDIDATES:
                logger.info(
                    f"Trying format: {candidate.mime_type} ({candidate.filename})"
                )
                files = {"file": (candidate.filename, audio, candidate.mime_type)}
                try:
                    response = await client.post(
                        self.url, headers=headers, data=data, files=files
                    )
                except httpx.RequestError as e:
                    logger.warning(f"Request error with {candidate.mime_type}: {e}")
                    last_error = str(e)
                    continue

                if response.is_success:
                    logger.info(f"Transcription accepted as {candidate.mime_type}")
                    return self._parse(response)

                logger.warning(
                    f"Failed with {candidate.mime_type}: "
                    f"{response.status_code} - {response.text}"
                )
                last_error = response.text

        logger.error(f"All format attempts failed. Last error: {last_error}")
        raise TranscriptionUpstreamError(last_error)

    def _parse(self, response: httpx.Response) -> Transcription:
        try:
            text = response.json()["text"]
        except (ValueError, KeyError, TypeError):
            raise TranscriptionUpstreamError(
                f"Malformed transcription response: {response.text}"
            ) from None
        return Transcription(text=text or "", confidence=self.default_confidence)
