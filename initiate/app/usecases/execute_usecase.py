from typing import Any, Dict, List

from fastapi import Depends

from initiate.app.dependencies import get_chat_service, get_tool_registry
from initiate.app.models.domain.conversation import OrchestrationResult
from initiate.app.services.chat_completion_service import ChatCompletionService
from initiate.app.services.conversation_orchestrator import ConversationOrchestrator
from initiate.app.tools.registry import ToolRegistry


class ExecuteUsecase:
    """Plain chat with tools; the caller supplies the whole conversation."""

    def __init__(
        self,
        chat_service: ChatCompletionService = Depends(get_chat_service),
        registry: ToolRegistry = Depends(get_tool_registry),
    ):
        self.orchestrator = ConversationOrchestrator(chat_service, registry)

    async def execute(self, messages: List[Dict[str, Any]]) -> OrchestrationResult:
        return await self.orchestrator.run(messages)
