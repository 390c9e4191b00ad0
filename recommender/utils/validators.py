"""
Input validation utilities
"""
import re
from typing import Optional

_WORKSPACE_ID_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


def validate_workspace_id(workspace_id: str) -> bool:
    """
    Validate workspace identifier format

    Args:
        workspace_id: Workspace ID to validate (UUID or slug)

    Returns:
        True if valid format
    """
    if not workspace_id or len(workspace_id) > 255:
        return False
    return _WORKSPACE_ID_RE.match(workspace_id) is not None


def parse_limit(raw: Optional[str], default: int, maximum: int) -> int:
    """
    Parse a `limit` query parameter

    Args:
        raw: Raw query string value (None when omitted)
        default: Value used when the parameter is omitted or blank
        maximum: Upper bound accepted from callers

    Returns:
        Parsed limit

    Raises:
        ValueError: If the value is not a positive integer within bounds
    """
    if raw is None or not raw.strip():
        return default

    try:
        limit = int(raw.strip())
    except ValueError:
        raise ValueError(f"limit must be an integer, got {raw!r}")

    if limit < 1 or limit > maximum:
        raise ValueError(f"limit must be between 1 and {maximum}")

    return limit


def sanitize_input(text: Optional[str], max_length: int = 10000) -> str:
    """
    Sanitize user input

    Args:
        text: Input text to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if text is None:
        return ""

    # Remove null bytes
    text = text.replace('\x00', '')

    # Truncate to max length
    if len(text) > max_length:
        text = text[:max_length]

    return text.strip()
