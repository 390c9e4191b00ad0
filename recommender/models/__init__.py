"""
Pydantic models for the Workspace Recommender
"""

from recommender.models.schemas import (
    # Enums
    Priority,
    ConfidenceLevel,
    COMPLETED_STATUSES,

    # Ticket Store Records
    UserRecord,
    TicketRecord,
    TicketQuery,

    # Recommendation Results
    AssigneeSummary,
    AssigneeRecommendation,
    PriorityRecommendation,
    ResponseTimeEstimate,
    SimilarTicketMatch,

    # Utility Models
    ErrorResponse,
)

__all__ = [
    # Enums
    "Priority",
    "ConfidenceLevel",
    "COMPLETED_STATUSES",

    # Ticket Store Records
    "UserRecord",
    "TicketRecord",
    "TicketQuery",

    # Recommendation Results
    "AssigneeSummary",
    "AssigneeRecommendation",
    "PriorityRecommendation",
    "ResponseTimeEstimate",
    "SimilarTicketMatch",

    # Utility Models
    "ErrorResponse",
]
