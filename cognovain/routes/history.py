from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from cognovain.auth import get_current_identity
from cognovain.dependencies import get_history_store
from cognovain.errors import ValidationError
from cognovain.schemas.analysis import (
    AnalysisEntry,
    HistoryEntryOut,
    HistoryListResponse,
    SaveHistoryRequest,
    SaveHistoryResponse,
)
from cognovain.services.history_store import HistoryStore
from cognovain.utils.analysis_format import extract_cognitive_biases, generate_shareable_summary
from cognovain.utils.security import security_headers

router = APIRouter(prefix="/api", tags=["history"])


def to_history_out(entry: AnalysisEntry) -> HistoryEntryOut:
    biases = extract_cognitive_biases(entry.analysis)
    return HistoryEntryOut(
        id=entry.id,
        statement=entry.statement,
        analysis=entry.analysis,
        created_at=entry.created_at,
        biases=biases,
        share_text=generate_shareable_summary(biases),
    )


@router.post("/history", response_model=SaveHistoryResponse)
async def save_history(
    payload: SaveHistoryRequest,
    identity: str = Depends(get_current_identity),
    history_store: HistoryStore = Depends(get_history_store),
):
    """Persists an analysis. Storage failures come back as a warning, not an error."""
    if not payload.statement.strip() or not payload.analysis.strip():
        raise ValidationError("Statement and analysis are required")

    result = await history_store.append(identity, payload.statement, payload.analysis)
    response = SaveHistoryResponse(
        success=result.success,
        warning=result.warning,
        entry=to_history_out(result.entry) if result.entry else None,
    )
    return JSONResponse(
        content=response.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=security_headers(success=True),
    )


@router.get("/history", response_model=HistoryListResponse)
async def list_history(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
    identity: str = Depends(get_current_identity),
    history_store: HistoryStore = Depends(get_history_store),
):
    """Returns the caller's analyses, newest first."""
    entries = await history_store.list(identity, limit=page_size, offset=(page - 1) * page_size)
    response = HistoryListResponse(
        entries=[to_history_out(entry) for entry in entries],
        page=page,
        page_size=page_size,
    )
    return JSONResponse(
        content=response.model_dump(mode="json", by_alias=True),
        headers=security_headers(success=True),
    )
