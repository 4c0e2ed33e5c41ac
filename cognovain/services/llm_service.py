import asyncio
from typing import Any, Awaitable, Callable, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import BlockedPromptException, StopCandidateException

from cognovain.config import settings
from cognovain.errors import (
    CognovainError,
    RateLimitError,
    UpstreamAccessError,
    UpstreamContentError,
    UpstreamError,
)
from cognovain.prompts.templates import ANALYSIS_REQUEST_PROMPT, ANALYSIS_SYSTEM_PROMPT
from cognovain.utils.logger import logger
from cognovain.utils.retry import retry_async


QUOTA_ERRORS = (google_exceptions.TooManyRequests, google_exceptions.ResourceExhausted)
ACCESS_ERRORS = (
    google_exceptions.Forbidden,
    google_exceptions.PermissionDenied,
    google_exceptions.Unauthorized,
    google_exceptions.Unauthenticated,
)
CONTENT_ERRORS = (
    google_exceptions.BadRequest,
    google_exceptions.InvalidArgument,
    google_exceptions.FailedPrecondition,
    BlockedPromptException,
    StopCandidateException,
    ValueError,  # raised by `response.text` when the candidate has no text parts
)


def classify_upstream_error(error: Exception) -> CognovainError:
    """Maps a Gemini SDK exception onto the application's error taxonomy."""
    if isinstance(error, CognovainError):
        return error
    if isinstance(error, QUOTA_ERRORS):
        return RateLimitError(retry_after=settings.RATE_LIMIT_RETRY_AFTER, upstream=True)
    if isinstance(error, ACCESS_ERRORS):
        return UpstreamAccessError()
    if isinstance(error, CONTENT_ERRORS):
        return UpstreamContentError()
    return UpstreamError(str(error) or error.__class__.__name__)


class LLMService:
    """Gemini binding used by the analysis endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
        model: Any = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.model_name = model_name or settings.GEMINI_MODEL
        self.max_retries = max_retries if max_retries is not None else settings.LLM_MAX_RETRIES
        self.base_delay = base_delay if base_delay is not None else settings.LLM_RETRY_BASE_DELAY
        self._sleep = sleep

        if model is None:
            genai.configure(api_key=api_key or settings.GEMINI_API_KEY)
            model = genai.GenerativeModel(self.model_name)
        self.model = model

    async def _generate_once(self, prompt: Any) -> str:
        try:
            response = await asyncio.to_thread(self.model.generate_content, prompt)
            return response.text
        except Exception as e:
            logger.error(f"Gemini API Error ({e.__class__.__name__}): {str(e)}")
            raise classify_upstream_error(e) from e

    async def generate(self, prompt: Any) -> str:
        """Generates text with bounded retries and exponential backoff."""
        return await retry_async(
            lambda: self._generate_once(prompt),
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            sleep=self._sleep,
        )

    async def analyze_statement(self, statement: str) -> str:
        """Asks Gemini for a cognitive-bias analysis of an already sanitized statement."""
        prompt = {
            "role": "user",
            "parts": [
                ANALYSIS_SYSTEM_PROMPT,
                ANALYSIS_REQUEST_PROMPT.format(statement=statement),
            ],
        }
        return await self.generate([prompt])
