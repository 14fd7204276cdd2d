"""FastAPI application entrypoint."""

from fastapi import FastAPI

from src.core.config import settings
from src.core.exceptions import register_exception_handlers
from src.core.logging import RequestLoggingMiddleware, configure_logging
from src.modules.appointments.router import router as appointments_router
from src.modules.directory.router import router as directory_router


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version="0.1.0",
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(appointments_router)
    app.include_router(directory_router)

    return app


app = create_app()
