"""
app/services/voice_service.py

Purpose: Voice-to-site pipeline

- Loads a stored (or remote) recording
- Transcribes it with Sarvam AI
- Extracts structured site / product data with the LLM

Flow:
    upload -> transcribe -> extract -> form data returned to the wizard
"""

import httpx
from typing import Any, Dict, Optional
from urllib.parse import unquote, urlparse

from app.core.config import settings
from app.core.exceptions import BadRequestError, ExternalServiceError, ResourceNotFoundError
from app.core.logging import get_logger, LogContext
from app.models.site import normalize_site_type
from app.services.llm_service import get_llm_service
from app.services.sarvam_service import get_sarvam_service
from app.services.storage_service import get_storage_service
from utils.constants import (
    DEFAULT_RECORDING_NAME,
    EXTRACTION_CONTEXTS,
    MSG_AUDIO_FETCH_FAILED,
    MSG_NO_AUDIO,
    MSG_NO_AUDIO_URL,
    MSG_NO_TRANSCRIPT,
)

logger = get_logger(__name__)


def filename_from_url(audio_url: str) -> str:
    """Last path segment of the URL, or recording.webm."""
    segment = unquote(urlparse(audio_url).path.rsplit("/", 1)[-1])
    return segment or DEFAULT_RECORDING_NAME


async def fetch_audio(audio_url: str) -> bytes:
    """
    Reads a recording. Our own file URLs are read straight from storage,
    anything else is downloaded over HTTP.

    Raises:
        ExternalServiceError: The audio could not be loaded
    """
    storage = get_storage_service()
    location = storage.parse_public_url(audio_url)

    if location:
        bucket, path = location
        try:
            data, _ = await storage.download(bucket, path)
            return data
        except ResourceNotFoundError:
            logger.error(f"Recording not found in storage: {bucket}/{path}")
            raise ExternalServiceError(MSG_AUDIO_FETCH_FAILED)

    try:
        async with httpx.AsyncClient(timeout=settings.EXTERNAL_SERVICE_TIMEOUT, follow_redirects=True) as client:
            response = await client.get(audio_url)
    except httpx.HTTPError as e:
        logger.error(f"Failed to download audio: {e}")
        raise ExternalServiceError(MSG_AUDIO_FETCH_FAILED)

    if response.status_code != 200:
        logger.error(f"Audio download returned {response.status_code}")
        raise ExternalServiceError(MSG_AUDIO_FETCH_FAILED)

    return response.content


async def process_audio_url(audio_url: Optional[str], context: Optional[str] = None) -> Dict[str, Any]:
    """
    Transcribes a stored recording and extracts data for one wizard step.

    Args:
        audio_url: Public URL returned by the upload endpoint
        context: "name", "details", "product" or None for the full shop

    Returns:
        {"transcription", "extractedData"}
    """
    if not audio_url:
        raise BadRequestError(MSG_NO_AUDIO_URL)

    if context not in EXTRACTION_CONTEXTS:
        context = None

    with LogContext(context=context or "shop"):
        audio = await fetch_audio(audio_url)
        filename = filename_from_url(audio_url)

        transcription = await get_sarvam_service().transcribe(audio, filename)
        logger.info(f"Transcription: {transcription[:80]}")

        extracted = await get_llm_service().extract_by_context(transcription, context)

    return {"transcription": transcription, "extractedData": extracted}


async def process_recording(
    audio: Optional[bytes],
    filename: Optional[str] = None,
    site_type: Optional[str] = None
) -> Dict[str, Any]:
    """
    One-shot pipeline: translate-transcribe an uploaded recording to English
    and extract Shop or Menu fields from it.

    Returns:
        {"transcript", "data"}

    Raises:
        BadRequestError: No audio
        ExternalServiceError: Vendor failure or an empty transcript
    """
    if not audio:
        raise BadRequestError(MSG_NO_AUDIO)

    kind = normalize_site_type(site_type)

    with LogContext(context=kind.value):
        transcript = await get_sarvam_service().transcribe_and_translate(
            audio,
            filename or DEFAULT_RECORDING_NAME
        )
        if not transcript.strip():
            raise ExternalServiceError(MSG_NO_TRANSCRIPT)

        logger.info(f"Transcript: {transcript[:80]}")
        data = await get_llm_service().extract_site_details(transcript, kind)

    return {"transcript": transcript, "data": data}
