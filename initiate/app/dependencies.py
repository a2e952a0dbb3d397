from functools import lru_cache

from fastapi import Depends

from initiate.app.config.settings import Settings, settings
from initiate.app.services.chat_completion_service import ChatCompletionService
from initiate.app.services.transcription_service import TranscriptionService
from initiate.app.tools.catalogue import build_default_registry
from initiate.app.tools.registry import ToolRegistry


def get_settings() -> Settings:
    return settings


@lru_cache
def get_tool_registry() -> ToolRegistry:
    # Built once; the registry is read-only after start-up.
    return build_default_registry(get_settings())


def get_chat_service(
    settings: Settings = Depends(get_settings),
) -> ChatCompletionService:
    return ChatCompletionService(settings)


def get_transcription_service(
    settings: Settings = Depends(get_settings),
) -> TranscriptionService:
    return TranscriptionService(settings)
