"""
app/services/sarvam_service.py

Purpose: Sarvam AI speech-to-text integration

- Plain transcription (speech-to-text, saarika)
- Transcription with English translation (speech-to-text-translate, saaras)
- Language is auto-detected by the vendor
"""

import httpx
from typing import Any, Dict, Optional
from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger
from utils.validation_utils import audio_mime_type

logger = get_logger(__name__)

STT_PATH = "/speech-to-text"
STT_TRANSLATE_PATH = "/speech-to-text-translate"


class SarvamService:
    """
    Service class for the Sarvam AI speech endpoints.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key if api_key is not None else settings.SARVAM_API_KEY
        self.base_url = (base_url or settings.SARVAM_BASE_URL).rstrip("/")
        self._timeout = settings.EXTERNAL_SERVICE_TIMEOUT
        self._transport = transport

    async def _post_audio(self, path: str, audio: bytes, filename: str, model: str) -> Dict[str, Any]:
        if not self.api_key:
            raise ExternalServiceError("Speech-to-text service is not configured")

        files = {"file": (filename, audio, audio_mime_type(filename))}
        data = {"model": model, "language_code": "unknown"}

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}{path}",
                    headers={"api-subscription-key": self.api_key},
                    files=files,
                    data=data
                )
        except httpx.TimeoutException:
            logger.error(f"Sarvam API timeout ({path})")
            raise ExternalServiceError("Speech-to-text service timed out")
        except httpx.RequestError as e:
            logger.error(f"Network error calling Sarvam: {e}")
            raise ExternalServiceError("Unable to reach speech-to-text service")

        if response.status_code != 200:
            logger.error(f"Sarvam API error: {response.status_code} - {response.text}")
            raise ExternalServiceError(
                f"Sarvam API error: {response.text}",
                details={"status_code": response.status_code}
            )

        try:
            return response.json()
        except ValueError:
            raise ExternalServiceError("Invalid response from speech-to-text service")

    async def transcribe(self, audio: bytes, filename: str) -> str:
        """
        Transcribes audio in its spoken language.

        Args:
            audio: Raw audio bytes
            filename: Original file name (drives the MIME type)

        Returns:
            Transcript text ("" when nothing was recognised)

        Raises:
            ExternalServiceError: On vendor or network failure
        """
        logger.info(f"Transcribing {filename} ({len(audio)} bytes)")
        result = await self._post_audio(STT_PATH, audio, filename, settings.SARVAM_STT_MODEL)
        return result.get("transcript") or ""

    async def transcribe_and_translate(self, audio: bytes, filename: str) -> str:
        """
        Transcribes audio and translates the transcript to English.
        """
        logger.info(f"Transcribing + translating {filename} ({len(audio)} bytes)")
        result = await self._post_audio(STT_TRANSLATE_PATH, audio, filename, settings.SARVAM_TRANSLATE_MODEL)
        return result.get("transcript") or ""


# Global Sarvam service instance
_sarvam_service: Optional[SarvamService] = None


def get_sarvam_service() -> SarvamService:
    """Get or create the global Sarvam service instance."""
    global _sarvam_service
    if _sarvam_service is None:
        _sarvam_service = SarvamService()
    return _sarvam_service


def close_sarvam_service():
    """Drop the global instance (called on shutdown)."""
    global _sarvam_service
    _sarvam_service = None
