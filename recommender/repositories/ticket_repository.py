"""
Ticket Repository

Read-only access to the workspace tickets kept by the portal in Supabase.
The recommender only ever lists a bounded, most-recent-first window of a
workspace's tickets with the assignee expanded.
"""
from __future__ import annotations

import asyncio
from datetime import datetime
from typing import List, Dict, Any, Optional

from pydantic import TypeAdapter, ValidationError

from recommender.config import get_settings
from recommender.models.schemas import TicketRecord, TicketQuery, UserRecord
from recommender.utils.logger import get_logger


logger = get_logger(__name__)
settings = get_settings()

TICKET_COLUMNS = (
    "id, workspace_id, custom_id, title, status, "
    "created_at, resolved_at, first_response_at"
)
ASSIGNEE_COLUMNS = "id, first_name, last_name, email"

_TIMESTAMP = TypeAdapter(Optional[datetime])


class TicketRepository:
    """Repository for workspace ticket reads."""

    def __init__(self, supabase_client=None) -> None:
        if supabase_client is None:
            from supabase import create_client  # Lazy import for tests

            self.client = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key
            )
        else:
            self.client = supabase_client

        self.table_name = settings.tickets_table
        self.select_clause = (
            f"{TICKET_COLUMNS}, "
            f"assignee:{settings.users_table}!assignee_id({ASSIGNEE_COLUMNS})"
        )
        logger.info("TicketRepository initialized for table: %s", self.table_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _deserialize(row: Dict[str, Any]) -> TicketRecord:
        """Convert Supabase row into TicketRecord model."""
        row = dict(row)
        assignee = row.get("assignee")
        if isinstance(assignee, list):
            # PostgREST returns a list when the relation is not detected as to-one
            assignee = assignee[0] if assignee else None
        row["assignee"] = TicketRepository._deserialize_user(assignee) if assignee else None
        for key in ("id", "workspace_id"):
            if row.get(key) is not None:
                row[key] = str(row[key])
        for key in ("custom_id", "title", "status"):
            row[key] = row.get(key) or ""
        TicketRepository._drop_inconsistent_timestamps(row)
        return TicketRecord(**row)

    @staticmethod
    def _drop_inconsistent_timestamps(row: Dict[str, Any]) -> None:
        """Null out resolved_at / first_response_at that precede created_at."""
        created_at = _TIMESTAMP.validate_python(row.get("created_at"))
        if created_at is None:
            return
        row["created_at"] = created_at
        for key in ("resolved_at", "first_response_at"):
            value = _TIMESTAMP.validate_python(row.get(key))
            if value is not None and value < created_at:
                logger.warning(
                    "Ticket %s: %s precedes created_at, ignoring it", row.get("id"), key
                )
                value = None
            row[key] = value

    @staticmethod
    def _deserialize_user(row: Dict[str, Any]) -> UserRecord:
        """Convert embedded assignee into UserRecord model."""
        return UserRecord(
            id=str(row["id"]),
            first_name=row.get("first_name") or "",
            last_name=row.get("last_name") or "",
            email=row.get("email") or ""
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------
    def list_tickets(self, workspace_id: str, query: TicketQuery) -> List[TicketRecord]:
        """
        List tickets of a workspace

        Args:
            workspace_id: Workspace identifier
            query: Ordering, row cap and optional filters

        Returns:
            Tickets in the requested order, at most `query.limit` of them

        Raises:
            Exception: Any Supabase failure is logged and re-raised
        """
        try:
            request = self.client.table(self.table_name) \
                .select(self.select_clause) \
                .eq("workspace_id", workspace_id)

            if query.created_after is not None:
                request = request.gt("created_at", query.created_after.isoformat())
            if query.responded_after is not None:
                request = request.gt("first_response_at", query.responded_after.isoformat())
            if query.assignee_id:
                request = request.eq("assignee_id", query.assignee_id)

            response = request \
                .order(query.order_by, desc=query.descending) \
                .limit(query.limit) \
                .execute()

            rows = response.data or []
            tickets = []
            for row in rows:
                try:
                    tickets.append(self._deserialize(row))
                except ValidationError as e:
                    logger.warning("Skipping malformed ticket row %s: %s", row.get("id"), e)
            logger.debug(
                "Fetched %d tickets for workspace %s (limit=%d)",
                len(tickets), workspace_id, query.limit
            )
            return tickets

        except Exception as exc:
            logger.error("Failed to list tickets for workspace %s: %s", workspace_id, exc)
            raise

    async def list_tickets_async(self, workspace_id: str, query: TicketQuery) -> List[TicketRecord]:
        """Async wrapper for list_tickets."""
        return await asyncio.to_thread(self.list_tickets, workspace_id, query)

    def ping(self) -> None:
        """Run a one-row read to check the store is reachable."""
        self.client.table(self.table_name).select("id").limit(1).execute()
