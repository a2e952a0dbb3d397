from fastapi import APIRouter, Depends

from initiate.app.controllers.transcribe_controller import TranscribeController
from initiate.app.models.schemas.transcription_schema import (
    TranscribeRequest,
    TranscribeResponse,
)
from initiate.app.utils.error_handler import handle_exceptions

router = APIRouter()


@router.post("/transcribe", response_model=TranscribeResponse)
@handle_exceptions
async def transcribe(
    request: TranscribeRequest,
    transcribe_controller: TranscribeController = Depends(TranscribeController),
):
    return await transcribe_controller.execute(request)
