import asyncio
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from cognovain.config import settings
from cognovain.errors import StorageReadError, StorageWriteError
from cognovain.schemas.analysis import AnalysisEntry, AppendResult
from cognovain.services.supabase_clients import SupabaseClients
from cognovain.utils.logger import logger
from cognovain.utils.security import mask_identity, sanitize_text


HISTORY_WRITE_WARNING = "Your analysis was generated, but it could not be saved to your history."


class HistoryStore:
    """
    Reads and writes the user's analysis history in Supabase.

    Writes are soft-fail: a storage error never turns a successful analysis
    into a failure, it comes back as `AppendResult.warning`. Reads are hard-fail
    and raise `StorageReadError`.
    """
    def __init__(self, clients: SupabaseClients, table: Optional[str] = None):
        self.clients = clients
        self.table = table or settings.ANALYSIS_HISTORY_TABLE

    async def append(self, owner_id: str, statement: str, analysis: str) -> AppendResult:
        """Saves a statement/analysis pair for `owner_id`."""
        try:
            entry = await asyncio.to_thread(self._insert, owner_id, statement, analysis)
        except StorageWriteError as e:
            logger.error(f"Error saving analysis to history for {mask_identity(owner_id)}: {e.message}")
            return AppendResult(success=True, warning=HISTORY_WRITE_WARNING)

        logger.info(f"Analysis saved to Supabase for user: {mask_identity(owner_id)}")
        return AppendResult(success=True, entry=entry)

    def _insert(self, owner_id: str, statement: str, analysis: str) -> AnalysisEntry:
        row = {
            "id": str(uuid.uuid4()),
            "user_id": owner_id,
            "statement": sanitize_text(statement),
            "analysis": analysis,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            response = self.clients.admin().table(self.table).insert(row).execute()
        except Exception as e:
            raise StorageWriteError(f"Failed to save analysis: {str(e)}") from e

        # Prefer the row as stored (server defaults), fall back to what we sent
        stored = response.data[0] if getattr(response, "data", None) else row
        try:
            return AnalysisEntry.model_validate(stored)
        except PydanticValidationError as e:
            raise StorageWriteError(f"Unexpected row returned by Supabase: {str(e)}") from e

    async def list(self, owner_id: str, limit: Optional[int] = None, offset: int = 0) -> List[AnalysisEntry]:
        """Returns the user's entries, newest first."""
        try:
            entries = await asyncio.to_thread(self._select, owner_id, limit, offset)
        except StorageReadError as e:
            logger.error(f"Error getting analysis history for {mask_identity(owner_id)}: {e.message}")
            raise

        logger.info(f"Fetched {len(entries)} history entries for {mask_identity(owner_id)}")
        return entries

    def _select(self, owner_id: str, limit: Optional[int], offset: int) -> List[AnalysisEntry]:
        try:
            query = (
                self.clients.restricted()
                .table(self.table)
                .select("*")
                .eq("user_id", owner_id)
                .order("created_at", desc=True)
            )
            if limit is not None:
                query = query.range(offset, offset + limit - 1)
            response = query.execute()
        except Exception as e:
            raise StorageReadError(f"Failed to fetch analysis history: {str(e)}") from e

        try:
            entries = [AnalysisEntry.model_validate(row) for row in (response.data or [])]
        except PydanticValidationError as e:
            raise StorageReadError(f"Malformed history row: {str(e)}") from e

        # Never hand out another user's rows, whatever the store returned
        entries = [entry for entry in entries if entry.owner_id == owner_id]
        entries.sort(key=lambda entry: entry.created_at, reverse=True)
        return entries
