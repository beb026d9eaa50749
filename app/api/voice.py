"""
app/api/voice.py

Purpose: Voice pipeline endpoints used by the onboarding wizard

- Upload a recording
- Transcribe + extract for one wizard step
- One-shot transcribe-translate + extract for a Shop or Menu
"""

from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile

from app.core.exceptions import BadRequestError
from app.schemas.voice import (
    ProcessRecordingResponse,
    ProcessVoiceRequest,
    ProcessVoiceResponse,
    UploadResponse,
)
from app.services import upload_service, voice_service
from utils.constants import MSG_NO_AUDIO

router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload_audio(audio: Optional[UploadFile] = File(default=None)):
    if audio is None:
        raise BadRequestError(MSG_NO_AUDIO)

    data = await audio.read()
    result = await upload_service.upload_recording(data, audio.content_type)
    return UploadResponse(success=True, audioUrl=result["audioUrl"], path=result["path"])


@router.post("/process", response_model=ProcessVoiceResponse)
async def process_voice(payload: ProcessVoiceRequest):
    """
    Transcribes a previously uploaded recording and extracts the data
    for the requested context (name, details, product or full shop).
    """
    result = await voice_service.process_audio_url(payload.audio_url, payload.context)
    return ProcessVoiceResponse(
        success=True,
        transcription=result["transcription"],
        extractedData=result["extractedData"]
    )


@router.post("/process-recording", response_model=ProcessRecordingResponse)
async def process_recording(
    audio: Optional[UploadFile] = File(default=None),
    type: str = Form(default="Shop")
):
    if audio is None:
        raise BadRequestError(MSG_NO_AUDIO)

    data = await audio.read()
    result = await voice_service.process_recording(data, audio.filename, type)
    return ProcessRecordingResponse(transcript=result["transcript"], data=result["data"])
