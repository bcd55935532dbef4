"""
Error Handling Utilities

Sanitizes exception messages before they are returned to MCP clients, so
that unexpected failures do not leak local paths.
"""

import re
from pathlib import Path

MAX_ERROR_LENGTH = 200


def sanitize_error(error: Exception) -> str:
    """
    Sanitize an exception message for a tool response.

    The home directory is collapsed to ``~``, directory components of
    absolute paths are removed and long messages are truncated.

    Args:
        error: The exception to sanitize

    Returns:
        Sanitized error message string

    Example:
        >>> sanitize_error(PermissionError("cannot open /etc/teleport/tls/key.pem"))
        'cannot open key.pem'
    """
    try:
        sanitized = str(error).replace(str(Path.home()), "~")

        # keep only the last path component
        sanitized = re.sub(r"/[a-zA-Z0-9_/.-]*/", "", sanitized)

        if len(sanitized) > MAX_ERROR_LENGTH:
            sanitized = sanitized[:MAX_ERROR_LENGTH] + "..."

        return sanitized or error.__class__.__name__

    except Exception:
        return "Internal server error occurred"
