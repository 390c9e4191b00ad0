"""
Pytest configuration and shared fixtures
"""
import pytest
from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

from recommender.models.schemas import TicketRecord, UserRecord

BASE_TIME = datetime(2026, 10, 12, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def ivan() -> UserRecord:
    return UserRecord(id="user-1", first_name="Иван", last_name="Иванов", email="ivan@example.com")


@pytest.fixture
def petr() -> UserRecord:
    return UserRecord(id="user-2", first_name="Пётр", last_name="Петров", email="petr@example.com")


@pytest.fixture
def make_ticket():
    """Factory for TicketRecord with durations given in minutes"""
    def _make(
        ticket_id: str,
        title: str,
        status: str = "new",
        assignee: Optional[UserRecord] = None,
        resolved_after: Optional[float] = None,
        responded_after: Optional[float] = None,
        created_at: datetime = BASE_TIME,
    ) -> TicketRecord:
        return TicketRecord(
            id=ticket_id,
            workspace_id="ws-1",
            custom_id=f"TICKET-{ticket_id}",
            title=title,
            status=status,
            assignee=assignee,
            created_at=created_at,
            resolved_at=created_at + timedelta(minutes=resolved_after) if resolved_after is not None else None,
            first_response_at=created_at + timedelta(minutes=responded_after) if responded_after is not None else None,
        )
    return _make


@pytest.fixture
def mock_repository():
    """Ticket store returning no tickets unless configured"""
    repository = MagicMock()
    repository.list_tickets_async = AsyncMock(return_value=[])
    repository.list_tickets = MagicMock(return_value=[])
    return repository
