"""
Error taxonomy for the Cognovain API.

Every error carries the HTTP status it maps to and a message that is safe to
show to the client. Handlers in `cognovain.main` turn them into JSON responses.
"""
from typing import Optional


class CognovainError(Exception):
    """Base class for all application errors."""
    status_code: int = 500
    public_message: str = "An error occurred while generating analysis"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.public_message
        super().__init__(self.message)


class ConfigurationError(CognovainError):
    public_message = "Service is not configured correctly"


class AuthenticationError(CognovainError):
    status_code = 401
    public_message = "Authentication required"


class ValidationError(CognovainError):
    status_code = 400
    public_message = "User text is required"


class RateLimitError(CognovainError):
    """Raised when the local limiter or the upstream quota refuses a request."""
    status_code = 429
    public_message = "Rate limit exceeded. Please try again later."

    def __init__(self, message: Optional[str] = None, retry_after: int = 60, upstream: bool = False):
        super().__init__(message)
        self.retry_after = retry_after
        self.upstream = upstream


class UpstreamError(CognovainError):
    """A transient failure of the LLM service. Retried."""
    public_message = "An error occurred while generating analysis"


class UpstreamAccessError(UpstreamError):
    status_code = 403
    public_message = "Unable to access the AI service. The API key may be invalid or restricted."


class UpstreamContentError(UpstreamError):
    status_code = 400
    public_message = "Your statement could not be processed. Please try rephrasing it."


class UpstreamExhaustedRetries(UpstreamError):
    public_message = "Failed to generate analysis. Please try again later."

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.last_error = last_error
        last_message = str(last_error) if last_error else "Unknown error"
        super().__init__(f"Failed after {attempts} attempts: {last_message}")


class StorageWriteError(CognovainError):
    """Soft error: `HistoryStore.append` downgrades it to a warning."""
    public_message = "Failed to save analysis to history"


class StorageReadError(CognovainError):
    public_message = "Failed to fetch analysis history"


# Errors that short-circuit the retry loop.
NON_RETRYABLE_ERRORS = (RateLimitError, UpstreamAccessError, UpstreamContentError)
