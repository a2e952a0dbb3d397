from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from initiate.app.models.domain.error import InvalidToolArgumentsError


class ToolDefinition(BaseModel):
    """Name, description and JSON schema the chat model sees for a tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    @property
    def required(self) -> List[str]:
        return list(self.parameters.get("required", []))

    def to_openai(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


def object_schema(
    properties: Dict[str, Dict[str, Any]],
    required: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Build the JSON schema for a tool's argument object."""
    return {
        "type": "object",
        "properties": properties,
        "required": required or [],
    }


class BaseTool(ABC):
    """
    A capability the chat model may ask us to run.

    The schema and the execution logic live on the same object, so a tool
    cannot be advertised to the model without something that runs it.
    """

    definition: ToolDefinition

    @property
    def name(self) -> str:
        return self.definition.name

    def schema(self) -> ToolDefinition:
        return self.definition

    def validate_arguments(self, arguments: Dict[str, Any]) -> None:
        missing = [
            field
            for field in self.definition.required
            if arguments.get(field) in (None, "")
        ]
        if missing:
            raise InvalidToolArgumentsError(
                self.name,
                f"Missing required argument(s): {', '.join(missing)}",
            )

    async def __call__(self, arguments: Dict[str, Any]) -> Any:
        self.validate_arguments(arguments)
        return await self.execute(arguments)

    @abstractmethod
    async def execute(self, arguments: Dict[str, Any]) -> Any:
        """Run the tool and return a JSON-serialisable result."""
