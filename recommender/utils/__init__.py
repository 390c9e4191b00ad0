"""
Utility functions
"""
from recommender.utils.logger import setup_logger, get_logger
from recommender.utils.keywords import extract_keywords, STOP_WORDS
from recommender.utils.validators import (
    validate_workspace_id,
    parse_limit,
    sanitize_input
)

__all__ = [
    "setup_logger",
    "get_logger",
    "extract_keywords",
    "STOP_WORDS",
    "validate_workspace_id",
    "parse_limit",
    "sanitize_input",
]
