"""
Repositories package for database operations

Provides read access to:
- workspace tickets with expanded assignees (TicketRepository)
"""
from recommender.repositories.ticket_repository import TicketRepository

__all__ = [
    "TicketRepository",
]
