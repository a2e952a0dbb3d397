from fastapi import Depends, status
from fastapi.responses import JSONResponse

from initiate.app.models.schemas.execute_schema import ExecuteRequest
from initiate.app.usecases.execute_usecase import ExecuteUsecase


class ExecuteController:
    def __init__(self, execute_usecase: ExecuteUsecase = Depends(ExecuteUsecase)):
        self.execute_usecase = execute_usecase

    async def execute(self, request: ExecuteRequest):
        result = await self.execute_usecase.execute(
            [message.to_dict() for message in request.messages]
        )
        return JSONResponse(
            content={"success": True, "data": result.data},
            status_code=status.HTTP_200_OK,
        )
