"""
Log sanitization utilities to keep credentials out of log output.

Bearer tokens, refresh tokens and client secrets travel through almost every
call in this package. Anything that might end up in a log line goes through
these helpers first.
"""

from typing import Optional

SECRET_KEYS = ('access_token', 'refresh_token', 'client_secret', 'token')


def sanitize_token(token: Optional[str], visible_chars: int = 4) -> str:
    """
    Sanitize a bearer token or other secret for logging.

    Args:
        token: Secret value to sanitize
        visible_chars: Number of leading characters to keep

    Returns:
        Sanitized token representation

    Example:
        "ya29.a0AfH6SMB..." -> "ya29*** (183 chars)"
    """
    if not token:
        return "[not-set]"

    if len(token) <= visible_chars * 2:
        return f"*** ({len(token)} chars)"
    return f"{token[:visible_chars]}*** ({len(token)} chars)"


def sanitize_file_id(file_id: Optional[str]) -> str:
    """
    Shorten a Drive file or folder id for logging.

    Args:
        file_id: Drive id to sanitize

    Returns:
        The id itself when short, otherwise its first 8 and last 4 characters
    """
    if not file_id:
        return "[no-id]"

    if len(file_id) <= 12:
        return f"[id: {file_id}]"
    return f"[id: {file_id[:8]}...{file_id[-4:]}]"


def sanitize_for_logging(**kwargs) -> dict:
    """
    Sanitize multiple fields for logging in one call.

    Args:
        **kwargs: Fields to sanitize (access_token, folder_id, file_id, etc.)

    Returns:
        Dictionary with sanitized values
    """
    sanitized = {}

    for key, value in kwargs.items():
        if key in SECRET_KEYS:
            sanitized[key] = sanitize_token(value)
        elif key.endswith('_id') and isinstance(value, str):
            sanitized[key] = sanitize_file_id(value)
        else:
            # Names, labels and paths are not sensitive
            sanitized[key] = value

    return sanitized
