import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import DEFAULT_JWT_SECRET, settings
from .database import engine
from .middleware import RateLimiter, api_rate_limit
from .routes import router
from .schemas import first_error_message
from .seed import init_database

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)


def _envelope(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "data": None, "error": error})


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        logger.info("Initializing Database...")
        init_database()
        logger.info("Database Initialized.")
    except SQLAlchemyError as e:
        logger.error(f"Startup DB Error: {e}")
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; using the built-in development secret")
    yield
    logger.info("Shutting down...")


def create_app() -> FastAPI:
    app = FastAPI(title="EduLite Nexus API", lifespan=lifespan, dependencies=[Depends(api_rate_limit)])

    app.state.api_limiter = RateLimiter(settings.api_rate_limit, settings.rate_limit_window_seconds)
    app.state.login_limiter = RateLimiter(
        settings.login_rate_limit,
        settings.rate_limit_window_seconds,
        message="Too many login attempts, please try again later.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return _envelope(status.HTTP_400_BAD_REQUEST, first_error_message(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")

    @app.get("/health")
    def health_check():
        """Liveness probe that also pings the database."""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            db_status = "connected"
        except SQLAlchemyError as e:
            db_status = f"error: {e}"
        return {"status": "ok", "database": db_status}

    app.include_router(router)
    return app


def main() -> None:
    import uvicorn

    uvicorn.run(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
