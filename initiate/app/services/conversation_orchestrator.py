import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

from initiate.app.models.domain.conversation import (
    OrchestrationResult,
    ToolCallRequest,
    ToolCallResult,
)
from initiate.app.models.domain.error import OrchestrationError
from initiate.app.services.chat_completion_service import ChatCompletionService
from initiate.app.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class ConversationOrchestrator:
    """
    Runs one user turn through the chat model with at most one tool round.

    First pass: the conversation plus every tool schema. If the model asks
    for tools they all run concurrently, each failure turned into an
    `{"error": ...}` result, and a second pass produces the final answer.
    Tool calls in the second response are not executed.
    """

    def __init__(
        self,
        chat_service: ChatCompletionService,
        registry: ToolRegistry,
        system_prompt: Optional[str] = None,
    ):
        self.chat_service = chat_service
        self.registry = registry
        self.system_prompt = system_prompt

    async def run(self, messages: List[Dict[str, Any]]) -> OrchestrationResult:
        conversation: List[Dict[str, Any]] = []
        if self.system_prompt:
            conversation.append({"role": "system", "content": self.system_prompt})
        conversation.extend(messages)

        tools = self.registry.openai_tools()

        logger.info(
            f"First pass: {len(conversation)} message(s), {len(tools)} tool(s)"
        )
        first = await self.chat_service.completions(conversation, tools)
        assistant_message = self._first_message(first)

        tool_calls = [
            ToolCallRequest.from_dict(tc)
            for tc in assistant_message.get("tool_calls") or []
        ]
        if not tool_calls:
            logger.info("No tool calls requested, returning first response")
            return OrchestrationResult(
                data=first,
                final_content=assistant_message.get("content") or "",
                messages=conversation,
                chat_calls=1,
            )

        logger.info(
            f"Model requested {len(tool_calls)} tool call(s): "
            f"{', '.join(tc.name for tc in tool_calls)}"
        )
        tool_results = await self.execute_tool_calls(tool_calls)

        follow_up = [
            *conversation,
            assistant_message,
            *[result.to_message() for result in tool_results],
        ]

        logger.info(f"Second pass: {len(follow_up)} message(s)")
        second = await self.chat_service.completions(follow_up, tools)
        final_message = self._first_message(second)

        if final_message.get("tool_calls"):
            logger.warning(
                f"Ignoring {len(final_message['tool_calls'])} tool call(s) "
                "in the second response; only one tool round is run"
            )

        return OrchestrationResult(
            data=second,
            final_content=final_message.get("content") or "",
            tool_calls=tool_calls,
            tool_results=tool_results,
            messages=follow_up,
            chat_calls=2,
        )

    async def execute_tool_calls(
        self, tool_calls: List[ToolCallRequest]
    ) -> List[ToolCallResult]:
        """Run every call concurrently; results keep the request order."""
        return list(
            await asyncio.gather(
                *(self._execute_tool_call(tool_call) for tool_call in tool_calls)
            )
        )

    async def _execute_tool_call(self, tool_call: ToolCallRequest) -> ToolCallResult:
        try:
            arguments = tool_call.parse_arguments()
            result = await self.registry.execute(tool_call.name, arguments)
            content = json.dumps(result)
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            logger.warning(f"Tool {tool_call.name} ({tool_call.id}) failed: {message}")
            return ToolCallResult(
                tool_call_id=tool_call.id,
                tool_name=tool_call.name,
                content=json.dumps({"error": message}),
                ok=False,
            )

        return ToolCallResult(
            tool_call_id=tool_call.id,
            tool_name=tool_call.name,
            content=content,
        )

    @staticmethod
    def _first_message(response: Dict[str, Any]) -> Dict[str, Any]:
        try:
            message = response["choices"][0]["message"]
        except (KeyError, IndexError, TypeError):
            raise OrchestrationError(
                "Chat completion response has no choices[0].message"
            ) from None
        if not isinstance(message, dict):
            raise OrchestrationError("Chat completion message is not an object")
        return message
