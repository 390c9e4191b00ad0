"""
Priority Classifier

Suggests a ticket priority from its text:
1. Keyword tiers (critical / important / problem words). Each tier is an
   ordered list; the first keyword found as a substring adds the tier score
   and the rest of the tier is skipped.
2. History: if enough lexically similar tickets were resolved quickly, the
   new one is likely urgent too.
"""
from typing import List, Optional, Iterable, Tuple

from recommender.config import get_settings
from recommender.models.schemas import (
    Priority,
    PriorityRecommendation,
    TicketQuery,
    TicketRecord,
)
from recommender.utils.keywords import extract_keywords, join_text
from recommender.utils.logger import get_logger
from recommender.utils.rounding import round_half_up

logger = get_logger(__name__)
settings = get_settings()

CRITICAL_KEYWORDS = [
    "срочно", "urgent", "критично", "critical", "авария", "не работает",
    "сломано", "broken", "down", "emergency", "асап", "asap",
]
HIGH_KEYWORDS = [
    "важно", "important", "приоритет", "priority", "быстро", "быстрее",
    "оперативно", "блокирует", "blocking", "regression",
]
MEDIUM_KEYWORDS = [
    "проблема", "issue", "ошибка", "error", "bug", "баг", "не могу",
    "cannot", "help", "помощь",
]

# (keywords, score, reason label), scanned in this order
KEYWORD_TIERS: List[Tuple[List[str], int, str]] = [
    (CRITICAL_KEYWORDS, 40, "critical keyword detected"),
    (HIGH_KEYWORDS, 25, "important keyword detected"),
    (MEDIUM_KEYWORDS, 10, "problem keyword detected"),
]

MIN_KEYWORD_OVERLAP = 2
MIN_SIMILAR_TICKETS = 3
FAST_RESOLUTION_HOURS = 4
FAST_FRACTION_THRESHOLD = 0.5
HISTORY_BONUS = 15

REASON_SIMILAR_FAST = "similar tickets resolved quickly"
REASON_STANDARD = "standard ticket"
REASON_DEFAULT = "automatic assessment"


def score_keywords(content: str) -> Tuple[int, List[str]]:
    """
    Score lower-cased content against the keyword tiers

    Returns:
        Accumulated score and one reason per tier hit
    """
    score = 0
    reasons: List[str] = []
    for keywords, tier_score, label in KEYWORD_TIERS:
        for keyword in keywords:
            if keyword in content:
                score += tier_score
                reasons.append(f'{label}: "{keyword}"')
                break
    return score, reasons


def similar_resolved_quickly(content: str, tickets: Iterable[TicketRecord]) -> bool:
    """
    Check whether lexically similar history was mostly resolved fast

    A ticket is similar when its title shares at least two keywords with the
    content. Requires more than three similar tickets, more than half of
    which were resolved within four hours.
    """
    input_keywords = extract_keywords(content)
    matching_total = 0
    matching_fast = 0

    for ticket in tickets:
        overlap = len(input_keywords & extract_keywords(ticket.title))
        if overlap < MIN_KEYWORD_OVERLAP:
            continue
        matching_total += 1
        resolution_ms = ticket.resolution_ms
        if resolution_ms is not None and resolution_ms / (1000 * 60 * 60) < FAST_RESOLUTION_HOURS:
            matching_fast += 1

    return (
        matching_total > MIN_SIMILAR_TICKETS
        and matching_fast / matching_total > FAST_FRACTION_THRESHOLD
    )


def priority_for_score(score: float) -> Tuple[Priority, float]:
    """Map an accumulated score to a priority and raw confidence"""
    if score >= 50:
        return Priority.CRITICAL, min(0.9, 0.6 + score / 200)
    if score >= 30:
        return Priority.HIGH, min(0.85, 0.5 + score / 150)
    if score >= 10:
        return Priority.MEDIUM, min(0.7, 0.4 + score / 100)
    return Priority.LOW, 0.5


def classify_priority(
    tickets: Iterable[TicketRecord],
    title: str,
    description: Optional[str] = None
) -> PriorityRecommendation:
    """
    Classify the priority of a new ticket

    Args:
        tickets: Recent workspace history
        title: Ticket title
        description: Ticket description

    Returns:
        Suggested priority with confidence and reasons
    """
    content = join_text(title, description).lower()
    score, reasons = score_keywords(content)

    if similar_resolved_quickly(content, tickets):
        score += HISTORY_BONUS
        reasons.append(REASON_SIMILAR_FAST)

    priority, confidence = priority_for_score(score)
    if priority == Priority.LOW:
        reasons.append(REASON_STANDARD)

    return PriorityRecommendation(
        suggested_priority=priority,
        confidence=round_half_up(confidence, 2),
        reasons=reasons or [REASON_DEFAULT]
    )


async def recommend_priority(
    repository,
    workspace_id: str,
    title: str,
    description: Optional[str] = None
) -> PriorityRecommendation:
    """Recommend a priority using the workspace's most recent tickets"""
    tickets = await repository.list_tickets_async(
        workspace_id,
        TicketQuery(limit=settings.priority_history_limit)
    )
    recommendation = classify_priority(tickets, title, description)
    logger.info(
        "Suggested %s priority (confidence %.2f) for workspace %s",
        recommendation.suggested_priority.value, recommendation.confidence, workspace_id
    )
    return recommendation
