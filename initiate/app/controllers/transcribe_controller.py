from fastapi import Depends, status
from fastapi.responses import JSONResponse

from initiate.app.models.schemas.transcription_schema import TranscribeRequest
from initiate.app.usecases.voice_query_usecase import VoiceQueryUsecase


class TranscribeController:
    def __init__(
        self, voice_query_usecase: VoiceQueryUsecase = Depends(VoiceQueryUsecase)
    ):
        self.voice_query_usecase = voice_query_usecase

    async def execute(self, request: TranscribeRequest):
        response = await self.voice_query_usecase.execute(
            request.audio, request.format
        )
        return JSONResponse(content=response, status_code=status.HTTP_200_OK)
