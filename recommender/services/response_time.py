"""
Response-Time Estimator

Estimates first-response latency from the last 30 days of a workspace's
answered tickets. The median latency is the base estimate; it is inflated
for weekends and out-of-hours requests, judged against the current time.
"""
import math
from datetime import datetime, timedelta
from typing import List, Optional, Iterable

from recommender.config import get_settings
from recommender.models.schemas import (
    ConfidenceLevel,
    ResponseTimeEstimate,
    TicketQuery,
    TicketRecord,
)
from recommender.utils.logger import get_logger
from recommender.utils.rounding import round_to_int

logger = get_logger(__name__)
settings = get_settings()

DEFAULT_ESTIMATE_MINUTES = 60
MAX_RESPONSE_MINUTES = 60 * 24 * 7

WEEKEND_MULTIPLIER = 1.5
OFF_HOURS_MULTIPLIER = 1.3
BUSINESS_HOURS_START = 9
BUSINESS_HOURS_END = 18

HIGH_CONFIDENCE_SAMPLES = 20
MEDIUM_CONFIDENCE_SAMPLES = 10
MAX_STABLE_VARIATION = 0.5

FACTOR_DEFAULT = "insufficient data, default value used"
FACTOR_WEEKEND = "weekend (+50% to time)"
FACTOR_OFF_HOURS = "outside business hours (+30% to time)"
FACTOR_STABLE = "stable historical data"
FACTOR_LIMITED = "limited historical data"
FACTOR_ASSIGNEE = "assignee-specific data used"
FACTOR_HISTORICAL = "based on historical data"


def response_samples(tickets: Iterable[TicketRecord]) -> List[float]:
    """
    Collect first-response latencies in minutes

    Non-positive latencies and outliers of a week or more are dropped.
    """
    samples: List[float] = []
    for ticket in tickets:
        minutes = ticket.response_minutes
        if minutes is not None and 0 < minutes < MAX_RESPONSE_MINUTES:
            samples.append(minutes)
    return samples


def estimate_from_samples(
    samples: List[float],
    now: datetime,
    assignee_specific: bool = False
) -> ResponseTimeEstimate:
    """
    Build an estimate from latency samples

    Args:
        samples: Latencies in minutes
        now: Time of estimation (weekday/hour adjustments)
        assignee_specific: Whether samples were filtered to one assignee

    Returns:
        Estimate with confidence tier and contributing factors
    """
    if not samples:
        return ResponseTimeEstimate(
            estimated_minutes=DEFAULT_ESTIMATE_MINUTES,
            confidence_level=ConfidenceLevel.LOW,
            based_on_samples=0,
            factors=[FACTOR_DEFAULT]
        )

    ordered = sorted(samples)
    median = ordered[len(ordered) // 2]
    mean = sum(samples) / len(samples)
    std_dev = math.sqrt(sum((t - mean) ** 2 for t in samples) / len(samples))

    factors: List[str] = []
    estimate = median

    # Saturday=5, Sunday=6
    if now.weekday() >= 5:
        estimate *= WEEKEND_MULTIPLIER
        factors.append(FACTOR_WEEKEND)

    if now.hour < BUSINESS_HOURS_START or now.hour >= BUSINESS_HOURS_END:
        estimate *= OFF_HOURS_MULTIPLIER
        factors.append(FACTOR_OFF_HOURS)

    if len(samples) >= HIGH_CONFIDENCE_SAMPLES and std_dev / mean < MAX_STABLE_VARIATION:
        confidence = ConfidenceLevel.HIGH
        factors.append(FACTOR_STABLE)
    elif len(samples) >= MEDIUM_CONFIDENCE_SAMPLES:
        confidence = ConfidenceLevel.MEDIUM
    else:
        confidence = ConfidenceLevel.LOW
        factors.append(FACTOR_LIMITED)

    if assignee_specific:
        factors.append(FACTOR_ASSIGNEE)

    return ResponseTimeEstimate(
        # Sub-half-minute medians still report one minute
        estimated_minutes=max(1, round_to_int(estimate)),
        confidence_level=confidence,
        based_on_samples=len(samples),
        factors=factors or [FACTOR_HISTORICAL]
    )


async def estimate_response_time(
    repository,
    workspace_id: str,
    title: Optional[str] = None,
    assignee_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> ResponseTimeEstimate:
    """
    Estimate first-response time for a new ticket in a workspace

    Args:
        repository: Ticket store
        workspace_id: Workspace identifier
        title: Ticket title (accepted for API compatibility, not scored)
        assignee_id: Restrict history to this assignee
        now: Estimation time, defaults to the server's local time

    Returns:
        ResponseTimeEstimate
    """
    now = now or datetime.now()
    responded_after = now.astimezone() - timedelta(days=settings.response_time_window_days)

    tickets = await repository.list_tickets_async(
        workspace_id,
        TicketQuery(
            limit=settings.response_time_history_limit,
            responded_after=responded_after,
            assignee_id=assignee_id
        )
    )
    samples = response_samples(tickets)
    logger.debug("Response time estimate for %r uses %d samples", title, len(samples))

    estimate = estimate_from_samples(samples, now, assignee_specific=bool(assignee_id))
    logger.info(
        "Estimated %d min (%s confidence) for workspace %s",
        estimate.estimated_minutes, estimate.confidence_level.value, workspace_id
    )
    return estimate
