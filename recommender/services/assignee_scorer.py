"""
Assignee Scorer

Ranks candidate assignees for a new ticket from the workspace's recent
history. Each user who has been assigned at least one ticket in the window
starts at a base score of 50 and collects bonuses for:
- low current workload (few active tickets)
- resolution experience (completed tickets)
- fast average resolution
- overlap between their past ticket titles and the new ticket's keywords
"""
from collections import Counter
from typing import List, Optional, Dict, Iterable

from recommender.config import get_settings
from recommender.models.schemas import (
    AssigneeRecommendation,
    AssigneeSummary,
    TicketQuery,
    TicketRecord,
    UserRecord,
)
from recommender.utils.keywords import extract_keywords, join_text
from recommender.utils.logger import get_logger
from recommender.utils.rounding import round_to_int

logger = get_logger(__name__)
settings = get_settings()

BASE_SCORE = 50
MS_PER_HOUR = 1000 * 60 * 60

REASON_LOW_WORKLOAD = "low workload"
REASON_EXPERIENCE = "extensive resolution experience"
REASON_FAST_RESOLUTION = "fast resolution time"
REASON_KEYWORD_MATCH = "keyword match"
REASON_AVAILABLE = "available for assignment"


class AssigneeStats:
    """Per-user statistics accumulated over the history window"""

    def __init__(self, user: UserRecord):
        self.user = user
        self.total_assigned = 0
        self.active_count = 0
        self.completed_count = 0
        self.avg_resolution_ms = 0.0
        self.timed_resolutions = 0
        self.keywords: Counter = Counter()

    def add(self, ticket: TicketRecord) -> None:
        """Fold one assigned ticket into the statistics"""
        self.total_assigned += 1

        if ticket.is_completed:
            self.completed_count += 1
            resolution_ms = ticket.resolution_ms
            if resolution_ms is not None:
                self.timed_resolutions += 1
                n = self.timed_resolutions
                self.avg_resolution_ms = (self.avg_resolution_ms * (n - 1) + resolution_ms) / n
        else:
            self.active_count += 1

        self.keywords.update(extract_keywords(ticket.title))


def collect_assignee_stats(tickets: Iterable[TicketRecord]) -> Dict[str, AssigneeStats]:
    """
    Aggregate statistics per assignee

    Args:
        tickets: History window, most recent first

    Returns:
        Stats keyed by user ID, in first-seen order
    """
    stats: Dict[str, AssigneeStats] = {}
    for ticket in tickets:
        if ticket.assignee is None:
            continue
        user_stats = stats.get(ticket.assignee.id)
        if user_stats is None:
            user_stats = AssigneeStats(ticket.assignee)
            stats[ticket.assignee.id] = user_stats
        user_stats.add(ticket)
    return stats


def score_assignee(stats: AssigneeStats, input_keywords: set) -> AssigneeRecommendation:
    """Score a single candidate against the new ticket's keywords"""
    reasons: List[str] = []
    score: float = BASE_SCORE

    # Workload: fewer active tickets score higher
    score += max(0, 20 - stats.active_count * 2)
    if stats.active_count < 3:
        reasons.append(REASON_LOW_WORKLOAD)

    # Experience, capped at 10 completed tickets
    score += min(20, stats.completed_count * 2)
    if stats.completed_count >= 10:
        reasons.append(REASON_EXPERIENCE)

    # Speed, only when at least one completed ticket carried timestamps
    if stats.completed_count > 0 and stats.timed_resolutions > 0:
        avg_hours = stats.avg_resolution_ms / MS_PER_HOUR
        if avg_hours < 4:
            score += 15
            reasons.append(REASON_FAST_RESOLUTION)
        elif avg_hours < 24:
            score += 10

    # Expertise
    matches = sum(1 for keyword in input_keywords if keyword in stats.keywords)
    if matches > 0 and input_keywords:
        score += (matches / len(input_keywords)) * 20
        if matches >= 2:
            reasons.append(REASON_KEYWORD_MATCH)

    score = min(100, max(0, score))

    return AssigneeRecommendation(
        user_id=stats.user.id,
        user=AssigneeSummary.from_user(stats.user),
        score=round_to_int(score),
        reasons=reasons or [REASON_AVAILABLE]
    )


def rank_assignees(
    tickets: Iterable[TicketRecord],
    title: str,
    description: Optional[str] = None,
    limit: int = 5
) -> List[AssigneeRecommendation]:
    """
    Rank candidate assignees from a ticket history window

    Args:
        tickets: History window, most recent first
        title: New ticket title
        description: New ticket description
        limit: Maximum number of candidates returned

    Returns:
        Recommendations sorted by score, highest first; ties keep first-seen order
    """
    stats = collect_assignee_stats(tickets)
    input_keywords = extract_keywords(join_text(title, description))

    recommendations = [score_assignee(user_stats, input_keywords) for user_stats in stats.values()]
    recommendations.sort(key=lambda rec: rec.score, reverse=True)
    return recommendations[:limit]


async def recommend_assignees(
    repository,
    workspace_id: str,
    title: str,
    description: Optional[str] = None,
    limit: int = 5
) -> List[AssigneeRecommendation]:
    """
    Recommend assignees for a new ticket in a workspace

    Reads the most recent `assignee_history_limit` tickets and ranks the
    users assigned to them.
    """
    tickets = await repository.list_tickets_async(
        workspace_id,
        TicketQuery(limit=settings.assignee_history_limit)
    )
    recommendations = rank_assignees(tickets, title, description, limit)
    logger.info(
        "Ranked %d assignees for workspace %s from %d tickets",
        len(recommendations), workspace_id, len(tickets)
    )
    return recommendations
