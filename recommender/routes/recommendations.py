"""
Recommendation API Routes

Read-only endpoints for the workspace taken from request.state
(set by WorkspaceMiddleware):
- GET /api/v1/recommendations/assignees
- GET /api/v1/recommendations/priority
- GET /api/v1/recommendations/response-time
- GET /api/v1/recommendations/similar
"""
from functools import lru_cache
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from recommender.config import get_settings
from recommender.models.schemas import (
    AssigneeRecommendation,
    ErrorResponse,
    PriorityRecommendation,
    ResponseTimeEstimate,
    SimilarTicketMatch,
)
from recommender.services.recommendation_service import RecommendationService
from recommender.utils.logger import get_logger
from recommender.utils.validators import parse_limit, sanitize_input

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/recommendations", tags=["recommendations"])

UPSTREAM_ERROR_RESPONSES = {
    status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse, "description": "Ticket store unavailable"}
}


@lru_cache()
def get_recommendation_service() -> RecommendationService:
    """Shared service instance (holds only the ticket store client)"""
    return RecommendationService()


def get_workspace_id(request: Request) -> str:
    """Workspace resolved by WorkspaceMiddleware"""
    workspace_id = getattr(request.state, "workspace_id", None)
    if not workspace_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing workspace_id"
        )
    return workspace_id


def _limit(raw: Optional[str]) -> int:
    settings = get_settings()
    try:
        return parse_limit(raw, settings.default_result_limit, settings.max_result_limit)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _title(raw: str) -> str:
    title = sanitize_input(raw)
    if not title:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="title must not be empty"
        )
    return title


def _optional_text(raw: Optional[str]) -> Optional[str]:
    text = sanitize_input(raw)
    return text or None


def _upstream_failure(operation: str, error: Exception) -> JSONResponse:
    logger.error(f"{operation} failed: {error}")
    body = ErrorResponse(
        error="upstream_failure",
        message=f"Upstream ticket store failure: {str(error)}",
        detail={"operation": operation}
    )
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=body.model_dump(mode="json")
    )


@router.get(
    "/assignees",
    response_model=List[AssigneeRecommendation],
    responses=UPSTREAM_ERROR_RESPONSES,
    summary="Recommend assignees"
)
async def recommend_assignees(
    title: str = Query(..., description="New ticket title"),
    description: Optional[str] = Query(None, description="New ticket description"),
    limit: Optional[str] = Query(None, description="Maximum number of candidates (default 5)"),
    workspace_id: str = Depends(get_workspace_id),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """
    Rank users of the workspace by workload, experience, speed and expertise
    """
    title = _title(title)
    result_limit = _limit(limit)
    try:
        return await service.recommend_assignees(
            workspace_id, title, _optional_text(description), result_limit
        )
    except Exception as e:
        return _upstream_failure("Assignee recommendation", e)


@router.get(
    "/priority",
    response_model=PriorityRecommendation,
    responses=UPSTREAM_ERROR_RESPONSES,
    summary="Recommend priority"
)
async def recommend_priority(
    title: str = Query(..., description="Ticket title"),
    description: Optional[str] = Query(None, description="Ticket description"),
    workspace_id: str = Depends(get_workspace_id),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """
    Suggest a priority from keywords and similar history
    """
    title = _title(title)
    try:
        return await service.recommend_priority(workspace_id, title, _optional_text(description))
    except Exception as e:
        return _upstream_failure("Priority recommendation", e)


@router.get(
    "/response-time",
    response_model=ResponseTimeEstimate,
    responses=UPSTREAM_ERROR_RESPONSES,
    summary="Estimate first-response time"
)
async def estimate_response_time(
    title: Optional[str] = Query(None, description="Ticket title"),
    assignee_id: Optional[str] = Query(None, alias="assigneeId", description="Restrict to one assignee"),
    workspace_id: str = Depends(get_workspace_id),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """
    Estimate first-response time from the last 30 days of history
    """
    try:
        return await service.estimate_response_time(
            workspace_id, _optional_text(title), assignee_id or None
        )
    except Exception as e:
        return _upstream_failure("Response time estimate", e)


@router.get(
    "/similar",
    response_model=List[SimilarTicketMatch],
    responses=UPSTREAM_ERROR_RESPONSES,
    summary="Find similar tickets"
)
async def find_similar(
    title: str = Query(..., description="Ticket title"),
    description: Optional[str] = Query(None, description="Ticket description"),
    exclude_id: Optional[str] = Query(None, alias="excludeId", description="Ticket ID to leave out"),
    limit: Optional[str] = Query(None, description="Maximum number of matches (default 5)"),
    workspace_id: str = Depends(get_workspace_id),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """
    Find near-duplicate tickets by keyword overlap
    """
    title = _title(title)
    result_limit = _limit(limit)
    try:
        return await service.find_similar(
            workspace_id, title, _optional_text(description), exclude_id or None, result_limit
        )
    except Exception as e:
        return _upstream_failure("Similar ticket search", e)
