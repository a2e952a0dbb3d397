import logging
from typing import Any, Dict, Iterable, List, Optional

from initiate.app.models.domain.error import UnknownToolError
from initiate.app.tools.base import BaseTool, ToolDefinition

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Ordered, read-only catalogue of the tools offered to the chat model.

    Tools are registered once at start-up; the same ordered schema list is
    sent with every chat request.
    """

    def __init__(self, tools: Optional[Iterable[BaseTool]] = None):
        self._tools: Dict[str, BaseTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> List[str]:
        return list(self._tools)

    def get(self, name: str) -> BaseTool:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def definitions(self) -> List[ToolDefinition]:
        return [tool.schema() for tool in self._tools.values()]

    def openai_tools(self) -> List[Dict[str, Any]]:
        return [definition.to_openai() for definition in self.definitions()]

    async def execute(self, name: str, arguments: Dict[str, Any]) -> Any:
        """Run the named tool; unknown names raise UnknownToolError."""
        tool = self.get(name)
        logger.info(f"Executing tool: {name} with arguments {arguments}")
        return await tool(arguments)
