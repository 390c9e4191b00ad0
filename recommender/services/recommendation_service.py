"""
Recommendation Service

Entry point for the four read-only recommendation queries. Every call pulls
its own bounded history window from the ticket store; nothing is cached
between calls.
"""
from datetime import datetime
from typing import List, Optional

from recommender.models.schemas import (
    AssigneeRecommendation,
    PriorityRecommendation,
    ResponseTimeEstimate,
    SimilarTicketMatch,
)
from recommender.repositories.ticket_repository import TicketRepository
from recommender.services import assignee_scorer, priority_classifier, response_time, similarity
from recommender.utils.logger import get_logger

logger = get_logger(__name__)


class RecommendationService:
    """Recommends assignees and priority, estimates response time, finds similar tickets"""

    def __init__(self, repository: Optional[TicketRepository] = None):
        """
        Initialize service

        Args:
            repository: Ticket store (a Supabase-backed TicketRepository if None)
        """
        self.repository = repository or TicketRepository()

    async def recommend_assignees(
        self,
        workspace_id: str,
        title: str,
        description: Optional[str] = None,
        limit: int = 5
    ) -> List[AssigneeRecommendation]:
        return await assignee_scorer.recommend_assignees(
            self.repository, workspace_id, title, description, limit
        )

    async def recommend_priority(
        self,
        workspace_id: str,
        title: str,
        description: Optional[str] = None
    ) -> PriorityRecommendation:
        return await priority_classifier.recommend_priority(
            self.repository, workspace_id, title, description
        )

    async def estimate_response_time(
        self,
        workspace_id: str,
        title: Optional[str] = None,
        assignee_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> ResponseTimeEstimate:
        return await response_time.estimate_response_time(
            self.repository, workspace_id, title, assignee_id, now
        )

    async def find_similar(
        self,
        workspace_id: str,
        title: str,
        description: Optional[str] = None,
        exclude_id: Optional[str] = None,
        limit: int = 5
    ) -> List[SimilarTicketMatch]:
        return await similarity.find_similar(
            self.repository, workspace_id, title, description, exclude_id, limit
        )
