"""
Health check endpoints with dependency monitoring

Provides two endpoints:
- GET /api/v1/health - Basic health check
- GET /api/v1/health/dependencies - Ticket store reachability
"""
import time
from datetime import datetime
from typing import Dict, Optional
from fastapi import APIRouter, status
from pydantic import BaseModel, Field
import asyncio

from recommender import __version__
from recommender.config import get_settings
from recommender.repositories.ticket_repository import TicketRepository
from recommender.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/health", tags=["health"])

# Application start time for uptime calculation
APP_START_TIME = time.time()

# Cache for dependency check results (30 seconds TTL)
_dependency_cache: Optional["DependencyHealth"] = None
_cache_timestamp: float = 0.0
CACHE_TTL_SECONDS = 30.0
CHECK_TIMEOUT_SECONDS = 5.0


# ============================================================================
# Pydantic Models
# ============================================================================

class HealthResponse(BaseModel):
    """Basic health check response"""
    status: str = Field(..., description="Overall status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")
    version: str = Field(..., description="Application version")
    uptime_seconds: float = Field(..., description="Application uptime in seconds")


class DependencyStatus(BaseModel):
    """Status of a single dependency"""
    name: str = Field(..., description="Dependency name")
    status: str = Field(..., description="Status: healthy, degraded, unhealthy")
    latency_ms: Optional[float] = Field(None, description="Response latency in milliseconds")
    error_message: Optional[str] = Field(None, description="Error message if unhealthy")


class DependencyHealth(BaseModel):
    """Dependency health check response"""
    overall_status: str = Field(..., description="Overall status: healthy, degraded, unhealthy")
    dependencies: Dict[str, DependencyStatus] = Field(..., description="Individual dependency statuses")
    checked_at: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")


# ============================================================================
# Dependency Check Functions
# ============================================================================

async def check_ticket_store() -> DependencyStatus:
    """
    Check Supabase ticket store connectivity

    Returns:
        DependencyStatus with health information
    """
    if not settings.supabase_url or not settings.supabase_service_role_key:
        return DependencyStatus(
            name="ticket_store",
            status="degraded",
            error_message="Supabase credentials not configured"
        )

    try:
        start = time.time()

        repository = TicketRepository()
        await asyncio.wait_for(
            asyncio.to_thread(repository.ping),
            timeout=CHECK_TIMEOUT_SECONDS
        )

        latency = (time.time() - start) * 1000

        return DependencyStatus(
            name="ticket_store",
            status="healthy",
            latency_ms=round(latency, 2)
        )

    except asyncio.TimeoutError:
        logger.error("Ticket store health check timed out")
        return DependencyStatus(
            name="ticket_store",
            status="unhealthy",
            error_message=f"Request timed out after {CHECK_TIMEOUT_SECONDS:.0f} seconds"
        )
    except Exception as e:
        logger.error(f"Ticket store health check failed: {e}")
        return DependencyStatus(
            name="ticket_store",
            status="unhealthy",
            error_message=str(e)
        )


def determine_overall_status(dependencies: Dict[str, DependencyStatus]) -> str:
    """
    Determine overall system status based on dependency health

    The ticket store is critical: without it no recommendation can be made.

    Args:
        dependencies: Dictionary of dependency statuses

    Returns:
        Overall status string
    """
    if any(dep.status == "unhealthy" for dep in dependencies.values()):
        return "unhealthy"
    if any(dep.status == "degraded" for dep in dependencies.values()):
        return "degraded"
    return "healthy"


# ============================================================================
# API Endpoints
# ============================================================================

@router.get(
    "/",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns basic application health status and uptime"
)
async def basic_health_check() -> HealthResponse:
    """
    Basic health check endpoint

    Always returns 200 OK. Does not check external dependencies.
    """
    uptime = time.time() - APP_START_TIME

    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=__version__,
        uptime_seconds=round(uptime, 2)
    )


@router.get(
    "/dependencies",
    response_model=DependencyHealth,
    status_code=status.HTTP_200_OK,
    summary="Dependency health check",
    description="Checks the ticket store and returns detailed status"
)
async def dependency_health_check() -> DependencyHealth:
    """
    Dependency health check endpoint

    Results are cached for 30 seconds to avoid hammering the ticket store.
    Always returns 200 OK with detailed status information.
    """
    global _dependency_cache, _cache_timestamp

    current_time = time.time()
    if _dependency_cache and (current_time - _cache_timestamp) < CACHE_TTL_SECONDS:
        logger.debug("Returning cached dependency health check results")
        return _dependency_cache

    logger.info("Performing dependency health checks")
    dependencies = {"ticket_store": await check_ticket_store()}

    response = DependencyHealth(
        overall_status=determine_overall_status(dependencies),
        dependencies=dependencies,
        checked_at=datetime.utcnow()
    )

    _dependency_cache = response
    _cache_timestamp = current_time

    unhealthy_deps = [
        name for name, dep in dependencies.items()
        if dep.status == "unhealthy"
    ]
    if unhealthy_deps:
        logger.warning(f"Unhealthy dependencies: {', '.join(unhealthy_deps)}")

    return response
