from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ChatInput(BaseModel):
    role: str = Field(..., description="Message author: user, assistant or system")
    content: Optional[str] = Field(default=None, description="Message text")

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


class ExecuteRequest(BaseModel):
    messages: List[ChatInput] = Field(
        ..., description="The conversation so far, oldest first"
    )


class ExecuteResponse(BaseModel):
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
