from fastapi import APIRouter, Depends

from initiate.app.dependencies import get_tool_registry
from initiate.app.tools.registry import ToolRegistry

router = APIRouter()


@router.get("/health")
async def health(registry: ToolRegistry = Depends(get_tool_registry)):
    return {"status": "healthy", "tools": len(registry)}
