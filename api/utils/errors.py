"""
Standardized API error responses.

All errors follow the format: {"error": "error_code", "detail": "optional message"}

Error codes should be:
- snake_case
- descriptive but concise
- machine-parseable (no spaces or special chars)
"""

from flask import jsonify
from typing import Optional

from core.config import MESSAGES


def error_response(
    code: str,
    status: int = 400,
    detail: Optional[str] = None,
    **extra
):
    """
    Create a standardized error response.

    Args:
        code: Machine-readable error code (snake_case)
        status: HTTP status code
        detail: Human-readable explanation (optional)
        **extra: Additional fields to include in response

    Returns:
        Tuple of (jsonify response, status code)
    """
    payload = {"error": code}
    if detail:
        payload["detail"] = detail
    payload.update(extra)
    return jsonify(payload), status


# Validation (400)
def missing_field(field: str):
    """Required field is missing."""
    return error_response(f"{field}_required", 400, f"Missing required field: {field}")


def invalid_field(field: str, detail: str = None):
    """Field value is invalid."""
    return error_response(f"invalid_{field}", 400, detail)


# -----------------------------------------------------------------------------
# Verse Lookup Errors
# -----------------------------------------------------------------------------

def invalid_scripture(text: str = None):
    """Input did not contain a valid Bible verse reference."""
    extra = {"text": text} if text is not None else {}
    return error_response("invalid_scripture", 404, MESSAGES["invalid_scripture"], **extra)


def no_result(ref: str):
    """Reference was valid but no parallel versions could be fetched."""
    return error_response("no_result", 404, MESSAGES["no_result"], ref=ref)
