from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cognovain.config import settings
from cognovain.errors import CognovainError, RateLimitError
from cognovain.routes import analyze, history
from cognovain.schemas.analysis import ErrorResponse
from cognovain.services.history_store import HistoryStore
from cognovain.services.llm_service import LLMService
from cognovain.services.supabase_clients import SupabaseClients
from cognovain.utils.logger import logger, set_log_level
from cognovain.utils.rate_limit import RateLimiter
from cognovain.utils.security import security_headers

GENERIC_ERROR_MESSAGE = "An error occurred while generating analysis"


def error_response(status_code: int, message: str, retry_after: Optional[int] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=security_headers(retry_after=retry_after),
    )


async def handle_app_error(request: Request, exc: CognovainError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} -> {exc.status_code} {exc.__class__.__name__}: {exc.message}")
    message = exc.message
    # Only development builds see upstream/storage details
    if exc.status_code >= 500 and not settings.is_development:
        message = exc.public_message
    retry_after = exc.retry_after if isinstance(exc, RateLimitError) else None
    return error_response(exc.status_code, message, retry_after=retry_after)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} -> invalid request: {exc.errors()}")
    return error_response(400, "Invalid request")


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    response = error_response(exc.status_code, str(exc.detail))
    # keep framework headers such as Allow on 405
    for name, value in (exc.headers or {}).items():
        response.headers[name] = value
    return response


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}")
    message = str(exc) if settings.is_development and str(exc) else GENERIC_ERROR_MESSAGE
    return error_response(500, message)


def create_app(
    rate_limiter: Optional[RateLimiter] = None,
    llm_service: Optional[LLMService] = None,
    history_store: Optional[HistoryStore] = None,
) -> FastAPI:
    set_log_level(logger, settings.LOG_LEVEL)

    app = FastAPI(
        title="Cognovain API",
        description="Cognitive-bias analysis of user statements powered by Gemini",
        version="1.0.0"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.rate_limiter = rate_limiter or RateLimiter(
        limit=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        retry_after=settings.RATE_LIMIT_RETRY_AFTER,
        max_entries=settings.RATE_LIMIT_MAX_ENTRIES,
    )
    app.state.llm_service = llm_service or LLMService()
    app.state.history_store = history_store or HistoryStore(SupabaseClients())

    app.add_exception_handler(CognovainError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(analyze.router)
    app.include_router(history.router)

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "running", "environment": settings.ENVIRONMENT}

    return app


def run():
    uvicorn.run("cognovain.main:create_app", factory=True, host=settings.HOST, port=settings.PORT)
