from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from cognovain.auth import get_current_identity
from cognovain.dependencies import get_llm_service, get_rate_limiter
from cognovain.errors import RateLimitError, ValidationError
from cognovain.schemas.analysis import AnalyzeResponse, ErrorResponse
from cognovain.services.llm_service import LLMService
from cognovain.utils.analysis_format import format_analysis_result
from cognovain.utils.logger import logger
from cognovain.utils.rate_limit import RateLimiter
from cognovain.utils.security import mask_identity, sanitize_text, security_headers

router = APIRouter(prefix="/api", tags=["analysis"])


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 401, 403, 429, 500)},
)
async def analyze_statement(
    request: Request,
    identity: str = Depends(get_current_identity),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    llm_service: LLMService = Depends(get_llm_service),
):
    """Runs a cognitive-bias analysis of the submitted statement."""
    # === RATE LIMIT CHECK (before any Gemini spend) ===
    decision = rate_limiter.check_and_record(identity)
    if not decision.allowed:
        logger.warning(f"Rate limit hit for {mask_identity(identity)}")
        raise RateLimitError(retry_after=decision.retry_after)

    # === INPUT VALIDATION ===
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError()

    user_text = body.get("userText") if isinstance(body, dict) else None
    if not isinstance(user_text, str):
        raise ValidationError()

    sanitized = sanitize_text(user_text)
    if not sanitized:
        raise ValidationError()

    logger.info(f"Analyzing statement ({len(sanitized)} chars) for {mask_identity(identity)}")
    analysis = await llm_service.analyze_statement(sanitized)

    return JSONResponse(
        content=AnalyzeResponse(analysis=format_analysis_result(analysis)).model_dump(),
        headers=security_headers(success=True),
    )
