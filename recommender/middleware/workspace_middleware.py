"""
Workspace Middleware - Extract and validate workspace_id
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable
from recommender.utils.logger import get_logger
from recommender.utils.validators import validate_workspace_id
from recommender.config import get_settings

logger = get_logger(__name__)

# Paths that do not operate on a workspace
EXEMPT_PATHS = {
    "/",
    "/api/v1/health",
    "/api/v1/health/",
    "/api/v1/health/dependencies",
    "/docs",
    "/openapi.json",
    "/redoc",
}


class WorkspaceMiddleware(BaseHTTPMiddleware):
    """
    Middleware to extract and validate workspace_id from requests

    Extracts workspace_id from:
    1. Header: X-Workspace-Id
    2. Query parameter: workspace_id

    Sets workspace_id in request.state for downstream use
    """

    async def dispatch(self, request: Request, call_next: Callable):
        """Process request and extract workspace_id"""

        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        settings = get_settings()

        # 1. Header, then 2. query parameter
        workspace_id = request.headers.get("X-Workspace-Id")
        if not workspace_id:
            workspace_id = request.query_params.get("workspace_id")

        # 3. Require workspace_id outside development
        if not workspace_id:
            if settings.is_development:
                workspace_id = "default"
                logger.warning(
                    "Missing workspace_id for %s, falling back to 'default' in development mode",
                    request.url.path
                )
            else:
                logger.error(f"Missing workspace_id for {request.url.path}")
                return JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content={"detail": "Missing workspace_id. Provide X-Workspace-Id header or workspace_id query parameter."}
                )

        # 4. Validate format (UUID or slug)
        if not validate_workspace_id(workspace_id):
            logger.error(f"Invalid workspace_id format: {workspace_id}")
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"detail": "Invalid workspace_id format. Use alphanumeric characters, hyphens, or underscores only."}
            )

        request.state.workspace_id = workspace_id
        logger.debug(f"Workspace: {workspace_id} | Path: {request.url.path}")

        response = await call_next(request)

        # Echo workspace_id for debugging
        response.headers["X-Workspace-Id"] = workspace_id

        return response
