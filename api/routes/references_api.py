# routes/references_api.py
"""
API endpoints for parallel verse lookup.

Provides access to:
- Reference resolution from search text or an editor line + caret
- Parallel translations of a verse from Bible Gateway
- Lookup history
"""

from flask import Blueprint, request, jsonify

from core import config
from services.cache import HistoryStorage
from services.lookup_service import LookupService
from utils.errors import invalid_field, invalid_scripture, missing_field, no_result

references_bp = Blueprint("references_api", __name__, url_prefix="/api/references")

# Lazily initialized service instance
_service = None


def get_service() -> LookupService:
    """Get or create LookupService instance."""
    global _service
    if _service is None:
        _service = LookupService(storage=HistoryStorage())
    return _service


def set_service(service: LookupService) -> None:
    """Replace the service instance (used by tests and embedding hosts)."""
    global _service
    _service = service


def _caret_arg():
    """Parse the optional caret query param. Returns (caret, error_response)."""
    raw = request.args.get("caret")
    if raw is None or raw == "":
        return None, None
    try:
        return int(raw), None
    except ValueError:
        return None, invalid_field("caret", "caret must be an integer offset")


def _result_payload(result) -> dict:
    return {
        "ref": result.reference,
        "title": result.title,
        "translations": [
            dict(t.to_dict(), label=t.label) for t in result.translations
        ],
    }


# =============================================================================
# Lookup Endpoints
# =============================================================================

@references_bp.get("/resolve")
def resolve_reference():
    """
    Resolve text to a canonical reference.

    Query params:
        text: Search text or editor line (required)
        caret: Caret offset into text (optional)

    Returns:
        {"ref": "John 3:16"}
    """
    text = request.args.get("text")
    if not text:
        return missing_field("text")

    caret, error = _caret_arg()
    if error:
        return error

    ref = get_service().resolve(text, caret)
    if ref is None:
        return invalid_scripture(text)
    return jsonify({"ref": ref})


@references_bp.get("/lookup")
def lookup_reference():
    """
    Look up parallel translations of a verse.

    Query params:
        ref: Scripture reference (e.g., "jn 3:16"), normalized before lookup, or
        text: Free text to resolve first
        caret: Caret offset into text (optional, with text)

    Returns:
        {
            "ref": "John 3:16",
            "title": "JOHN 3:16",
            "translations": [
                {"code": "NIV", "full_name": "...", "text": "...", "label": "..."},
                ...
            ]
        }
    """
    service = get_service()
    raw_ref = request.args.get("ref")

    if raw_ref:
        text, caret = raw_ref, None
    else:
        text = request.args.get("text")
        if not text:
            return missing_field("ref")
        caret, error = _caret_arg()
        if error:
            return error

    ref = service.resolve(text, caret)
    if ref is None:
        return invalid_scripture(text)

    result = service.lookup(ref)
    if result is None:
        return no_result(ref)
    return jsonify(_result_payload(result))


# =============================================================================
# History Endpoints
# =============================================================================

@references_bp.get("/history")
def get_history():
    """
    List previous lookups, most recent first.

    Returns:
        {"capacity": 25, "entries": [{"ref": ..., "title": ..., "translations": [...]}]}
    """
    service = get_service()
    return jsonify({
        "capacity": service.history.capacity,
        "entries": [_result_payload(entry.result) for entry in service.history_entries()],
    })


@references_bp.delete("/history")
def clear_history():
    """Clear the lookup history."""
    get_service().clear_history()
    return jsonify({"cleared": True})


@references_bp.get("/info")
def get_info():
    """Static text for an intro panel."""
    return jsonify({
        "name": "Bible Versions",
        "intro": "Show parallel Bible versions for a scripture reference.",
        "source": config.MESSAGES["source"],
        "searching": config.MESSAGES["searching"],
    })
