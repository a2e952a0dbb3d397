import logging
from functools import wraps

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from initiate.app.models.domain.error import AssistantError

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        content={"success": False, "error": message}, status_code=status_code
    )


def handle_exceptions(func):
    """Turn errors raised inside a route into `{success: false, error}`."""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except AssistantError as e:
            logger.error(f"{type(e).__name__} in {func.__name__}: {e.message}")
            return JSONResponse(content=e.to_dict(), status_code=e.status_code)
        except Exception:
            logger.exception(f"Unhandled error in {func.__name__}")
            return error_response(
                "Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    return wrapper


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error.get('msg')}" if location else error.get("msg", "")


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if request.url.path.endswith("/execute"):
        message = "Missing or invalid messages array"
    else:
        message = "Invalid request: " + "; ".join(_describe(e) for e in errors)
    return error_response(message, status.HTTP_400_BAD_REQUEST)
