from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class TranscribeRequest(BaseModel):
    audio: str = Field(..., min_length=1, description="Base64-encoded audio")
    format: str = Field(
        ..., min_length=1, description="Format reported by the recording device"
    )


class TranscriptionPayload(BaseModel):
    text: str
    confidence: float


class TranscribeResponse(BaseModel):
    success: bool
    transcription: TranscriptionPayload
    generation: Dict[str, Any]
    toolResults: List[Dict[str, Any]] = Field(default_factory=list)
    toolCalls: List[Dict[str, Any]] = Field(default_factory=list)
    finalContent: str = ""
