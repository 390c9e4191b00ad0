"""
Pydantic models for the Workspace Recommender

This module contains:
- Read-only records of the external ticket store (tickets, users)
- The query filters accepted by the ticket store
- Recommendation results returned to API callers

Result models serialize with the camelCase field names the portal clients
expect (`userId`, `suggestedPriority`, ...) while keeping snake_case
attributes in Python.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, Field, model_validator, ConfigDict


# ============================================================================
# Enums
# ============================================================================

class Priority(str, Enum):
    """Ordered priority levels, lowest first"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ConfidenceLevel(str, Enum):
    """Coarse reliability bucket of an estimate"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Ticket statuses that count as completed work
COMPLETED_STATUSES = frozenset({"done", "closed"})


# ============================================================================
# Ticket Store Records (read-only)
# ============================================================================

class UserRecord(BaseModel):
    """User referenced as a ticket assignee"""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1, description="User identifier")
    first_name: str = Field("", description="First name")
    last_name: str = Field("", description="Last name")
    email: str = Field("", description="Email address")


class TicketRecord(BaseModel):
    """
    Ticket (workspace entity) as read from the ticket store.

    Attributes:
        id: Ticket identifier
        workspace_id: Owning workspace
        custom_id: Human readable ID (e.g. "TICKET-42")
        title: Ticket title
        status: Free-form status ("new", "in-progress", "done", "closed", ...)
        assignee: Expanded assignee, if any
        created_at: Creation timestamp
        resolved_at: Resolution timestamp (optional)
        first_response_at: First response timestamp (optional)
    """
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1, description="Ticket identifier")
    workspace_id: str = Field(..., min_length=1, description="Workspace identifier")
    custom_id: str = Field("", description="Human readable ticket ID")
    title: str = Field("", description="Ticket title")
    status: str = Field("", description="Ticket status")
    assignee: Optional[UserRecord] = Field(None, description="Expanded assignee")
    created_at: datetime = Field(..., description="Creation timestamp")
    resolved_at: Optional[datetime] = Field(None, description="Resolution timestamp")
    first_response_at: Optional[datetime] = Field(None, description="First response timestamp")

    @model_validator(mode='after')
    def validate_timestamps(self) -> 'TicketRecord':
        """Resolution and first response cannot precede creation"""
        if self.resolved_at is not None and self.resolved_at < self.created_at:
            raise ValueError(f"Ticket {self.id}: resolved_at precedes created_at")
        if self.first_response_at is not None and self.first_response_at < self.created_at:
            raise ValueError(f"Ticket {self.id}: first_response_at precedes created_at")
        return self

    @property
    def is_completed(self) -> bool:
        """True for tickets in a completed status"""
        return self.status in COMPLETED_STATUSES

    @property
    def resolution_ms(self) -> Optional[float]:
        """Time from creation to resolution in milliseconds"""
        if self.resolved_at is None:
            return None
        return (self.resolved_at - self.created_at).total_seconds() * 1000

    @property
    def response_minutes(self) -> Optional[float]:
        """Time from creation to first response in minutes"""
        if self.first_response_at is None:
            return None
        return (self.first_response_at - self.created_at).total_seconds() / 60


class TicketQuery(BaseModel):
    """Filters accepted by the ticket store's list operation"""
    order_by: str = Field("created_at", description="Sort column")
    descending: bool = Field(True, description="Sort direction")
    limit: int = Field(..., ge=1, le=1000, description="Row cap")
    created_after: Optional[datetime] = Field(None, description="Only tickets created after")
    responded_after: Optional[datetime] = Field(None, description="Only tickets first answered after")
    assignee_id: Optional[str] = Field(None, description="Only tickets of this assignee")


# ============================================================================
# Recommendation Results
# ============================================================================

class AssigneeSummary(BaseModel):
    """Denormalized user summary embedded in assignee recommendations"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str

    @classmethod
    def from_user(cls, user: UserRecord) -> 'AssigneeSummary':
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email
        )


class AssigneeRecommendation(BaseModel):
    """Ranked candidate assignee"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", description="User identifier")
    user: AssigneeSummary
    score: int = Field(..., ge=0, le=100, description="Suitability score")
    reasons: List[str] = Field(..., min_length=1, description="Human readable reasons")


class PriorityRecommendation(BaseModel):
    """Suggested priority with confidence"""
    model_config = ConfigDict(populate_by_name=True)

    suggested_priority: Priority = Field(..., alias="suggestedPriority")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence rounded to 2 decimals")
    reasons: List[str] = Field(..., min_length=1)


class ResponseTimeEstimate(BaseModel):
    """First-response time estimate"""
    model_config = ConfigDict(populate_by_name=True)

    estimated_minutes: int = Field(..., gt=0, alias="estimatedMinutes")
    confidence_level: ConfidenceLevel = Field(..., alias="confidenceLevel")
    based_on_samples: int = Field(..., ge=0, alias="basedOnSamples")
    factors: List[str] = Field(default_factory=list)


class SimilarTicketMatch(BaseModel):
    """Historical ticket lexically similar to the input"""
    model_config = ConfigDict(populate_by_name=True)

    ticket_id: str = Field(..., alias="ticketId")
    custom_id: str = Field(..., alias="customId")
    title: str
    status: str
    similarity: float = Field(..., ge=0.0, le=1.0, description="Jaccard similarity")
    matching_terms: List[str] = Field(..., min_length=1, alias="matchingTerms")


# ============================================================================
# Utility Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response"""
    model_config = ConfigDict(from_attributes=True)

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    detail: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Error timestamp")
