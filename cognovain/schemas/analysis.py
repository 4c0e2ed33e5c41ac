from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---- Stored entries ----

class AnalysisEntry(BaseModel):
    """One row of the `analysis_history` table."""
    id: str
    owner_id: str = Field(..., alias="user_id")
    statement: str
    analysis: str
    created_at: datetime

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class AppendResult(BaseModel):
    success: bool = True
    warning: Optional[str] = None
    entry: Optional[AnalysisEntry] = None


# ---- Analyze ----

class AnalyzeResponse(BaseModel):
    analysis: str


class ErrorResponse(BaseModel):
    error: str


# ---- History ----

class HistoryEntryOut(BaseModel):
    id: str
    statement: str
    analysis: str
    created_at: datetime = Field(..., serialization_alias="createdAt")
    biases: List[str] = Field(default_factory=list)
    share_text: str = Field("", serialization_alias="shareText")


class SaveHistoryRequest(BaseModel):
    statement: str
    analysis: str


class SaveHistoryResponse(BaseModel):
    success: bool
    warning: Optional[str] = None
    entry: Optional[HistoryEntryOut] = None


class HistoryListResponse(BaseModel):
    entries: List[HistoryEntryOut]
    page: int
    page_size: int = Field(..., serialization_alias="pageSize")
