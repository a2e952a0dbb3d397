import json
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from initiate.app.models.domain.error import InvalidToolArgumentsError


class ToolCallRequest(BaseModel):
    """One tool invocation requested by the chat model."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    raw_arguments: str = "{}"

    @classmethod
    def from_dict(cls, data: Any) -> "ToolCallRequest":
        """
        Build a request from an OpenAI tool_call entry without rejecting it.

        Malformed entries still yield a request so the bad call is reported
        through parse_arguments alongside the others.
        """
        data = data if isinstance(data, dict) else {}
        function = data.get("function")
        function = function if isinstance(function, dict) else {}

        arguments = function.get("arguments")
        if arguments is None or arguments == "":
            arguments = "{}"
        elif not isinstance(arguments, str):
            arguments = json.dumps(arguments)

        return cls(
            id=str(data.get("id") or ""),
            name=str(function.get("name") or ""),
            raw_arguments=arguments,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.raw_arguments},
        }

    def parse_arguments(self) -> Dict[str, Any]:
        try:
            arguments = json.loads(self.raw_arguments)
        except json.JSONDecodeError as e:
            raise InvalidToolArgumentsError(
                self.name, f"Invalid JSON in tool arguments: {e}"
            ) from e
        if not isinstance(arguments, dict):
            raise InvalidToolArgumentsError(
                self.name, "Tool arguments must be a JSON object"
            )
        return arguments


class ToolCallResult(BaseModel):
    """The outcome of one tool call, success payload or error payload."""

    model_config = ConfigDict(frozen=True)

    tool_call_id: str
    tool_name: str
    content: str
    ok: bool = True

    def to_message(self) -> Dict[str, Any]:
        return {
            "tool_call_id": self.tool_call_id,
            "role": "tool",
            "name": self.tool_name,
            "content": self.content,
        }


class OrchestrationResult(BaseModel):
    """What one orchestration run hands back to its caller."""

    data: Dict[str, Any]
    final_content: str = ""
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)
    tool_results: List[ToolCallResult] = Field(default_factory=list)
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    chat_calls: int = 1
