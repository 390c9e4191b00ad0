"""
Middleware modules
"""
from .workspace_middleware import WorkspaceMiddleware
from .logging_middleware import LoggingMiddleware

__all__ = ["WorkspaceMiddleware", "LoggingMiddleware"]
