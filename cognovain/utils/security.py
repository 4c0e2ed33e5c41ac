"""
Security utilities for the Cognovain API.
Handles: input sanitization, identity masking, and response hardening headers.
"""
from typing import Dict, Optional
from cognovain.config import settings


BASE_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, max-age=0",
}


def security_headers(success: bool = False, retry_after: Optional[int] = None) -> Dict[str, str]:
    """Headers attached to every API response.

    Content-Type is set by JSONResponse itself.
    """
    headers = dict(BASE_SECURITY_HEADERS)
    if success:
        headers.update(NO_STORE_HEADERS)
    if retry_after is not None:
        headers["Retry-After"] = str(retry_after)
    return headers


def mask_identity(identity: Optional[str]) -> str:
    """Masks a user id for safe logging.
    Example: user_2abcdef123456 → user****3456
    """
    if not identity:
        return "anonymous"
    if len(identity) <= 8:
        return "****"
    return identity[:4] + "****" + identity[-4:]


def sanitize_text(text: str, max_length: int = None) -> str:
    """Sanitizes user text input.
    - Removes null bytes
    - Strips leading/trailing whitespace
    - Truncates (never rejects) to max length
    """
    if not text:
        return ""

    max_len = max_length or settings.MAX_STATEMENT_LENGTH

    # Remove null bytes (security risk)
    text = text.replace("\x00", "")

    text = text.strip()

    if len(text) > max_len:
        text = text[:max_len]

    return text
