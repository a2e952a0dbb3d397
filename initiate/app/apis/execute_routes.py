from fastapi import APIRouter, Depends

from initiate.app.controllers.execute_controller import ExecuteController
from initiate.app.models.schemas.execute_schema import (
    ExecuteRequest,
    ExecuteResponse,
)
from initiate.app.utils.error_handler import handle_exceptions

router = APIRouter()


@router.post("/execute", response_model=ExecuteResponse)
@handle_exceptions
async def execute(
    request: ExecuteRequest,
    execute_controller: ExecuteController = Depends(ExecuteController),
):
    return await execute_controller.execute(request)
