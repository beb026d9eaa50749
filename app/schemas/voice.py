"""
app/schemas/voice.py

Purpose: Voice pipeline payloads
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional


class UploadResponse(BaseModel):
    success: bool = True
    audioUrl: str
    path: str


class ProcessVoiceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    audio_url: Optional[str] = Field(default=None, alias="audioUrl")
    context: Optional[str] = None


class ProcessVoiceResponse(BaseModel):
    success: bool = True
    transcription: str
    extractedData: Dict[str, Any]


class ProcessRecordingResponse(BaseModel):
    transcript: str
    data: Dict[str, Any]


class ImageUploadResponse(BaseModel):
    success: bool = True
    url: str
    path: str
