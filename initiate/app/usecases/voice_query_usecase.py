import logging
from typing import Any, Dict

from fastapi import Depends

from initiate.app.config.settings import Settings
from initiate.app.dependencies import (
    get_chat_service,
    get_settings,
    get_tool_registry,
    get_transcription_service,
)
from initiate.app.prompts.assistant_prompt import watch_system_prompt
from initiate.app.services.chat_completion_service import ChatCompletionService
from initiate.app.services.conversation_orchestrator import ConversationOrchestrator
from initiate.app.services.transcription_service import TranscriptionService
from initiate.app.tools.registry import ToolRegistry
from initiate.app.utils.audio import decode_base64_audio

logger = logging.getLogger(__name__)


class VoiceQueryUsecase:
    """Transcribe a recording, then answer it as a short watch-sized reply."""

    def __init__(
        self,
        transcription_service: TranscriptionService = Depends(
            get_transcription_service
        ),
        chat_service: ChatCompletionService = Depends(get_chat_service),
        registry: ToolRegistry = Depends(get_tool_registry),
        settings: Settings = Depends(get_settings),
    ):
        self.transcription_service = transcription_service
        self.orchestrator = ConversationOrchestrator(
            chat_service,
            registry,
            system_prompt=watch_system_prompt(settings.DEFAULT_WALLET_ADDRESS),
        )

    async def execute_bytes(self, audio: bytes, audio_format: str) -> Dict[str, Any]:
        transcription = await self.transcription_service.transcribe(
            audio, audio_format
        )
        logger.info(f"Transcribed: {transcription.text!r}")

        result = await self.orchestrator.run(
            [{"role": "user", "content": transcription.text}]
        )

        return {
            "success": True,
            "transcription": transcription.model_dump(),
            "generation": result.data,
            "toolResults": [r.to_message() for r in result.tool_results],
            "toolCalls": [tc.to_dict() for tc in result.tool_calls],
            "finalContent": result.final_content,
        }

    async def execute(self, audio_base64: str, audio_format: str) -> Dict[str, Any]:
        return await self.execute_bytes(
            decode_base64_audio(audio_base64), audio_format
        )
