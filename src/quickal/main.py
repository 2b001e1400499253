import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from quickal.config import settings
from quickal.constants import APP_SETTINGS
from quickal.errors import AuthError
from quickal.routes import assistant, calendar, health

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s"
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=APP_SETTINGS.APP_NAME,
        version=APP_SETTINGS.VERSION,
        description=APP_SETTINGS.DESCRIPTION
    )

    @app.on_event("startup")
    async def startup_event():
        """Validate configuration on startup"""
        from quickal.config import validate_required_keys
        try:
            validate_required_keys()
            logger.info("Configuration validation passed")
        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup resources on shutdown"""
        logger.info("Shutting down gracefully...")

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        return JSONResponse(
            status_code=401,
            content={"error": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.get("/")
    async def root():
        return {"message": f"Welcome to {APP_SETTINGS.APP_NAME}"}

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(calendar.router, prefix="/calendar", tags=["Calendar"])
    app.include_router(assistant.router, prefix="/ai", tags=["Assistant"])

    return app


app = create_app()


def main():
    import uvicorn

    uvicorn.run(
        "quickal.main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.APP_ENV == "development"
    )


if __name__ == "__main__":
    main()
