import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from initiate.app.apis import execute_routes, health_routes, transcribe_routes
from initiate.app.config.settings import settings
from initiate.app.utils.error_handler import validation_exception_handler
from initiate.app.utils.logger import setup_logger

setup_logger(level=settings.LOG_LEVEL, fmt=settings.LOG_FORMAT)


def create_app() -> FastAPI:
    app = FastAPI(title="Initiate Voice Assistant")
    app.include_router(execute_routes.router, prefix="/api", tags=["assistant"])
    app.include_router(transcribe_routes.router, prefix="/api", tags=["voice"])
    app.include_router(health_routes.router, tags=["health"])
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("initiate.main:app", host="0.0.0.0", port=8000, reload=True)
