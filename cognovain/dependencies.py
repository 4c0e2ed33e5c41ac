"""FastAPI dependencies exposing the per-application services stored on `app.state`."""
from fastapi import Request

from cognovain.services.history_store import HistoryStore
from cognovain.services.llm_service import LLMService
from cognovain.utils.rate_limit import RateLimiter


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_llm_service(request: Request) -> LLMService:
    return request.app.state.llm_service


def get_history_store(request: Request) -> HistoryStore:
    return request.app.state.history_store
