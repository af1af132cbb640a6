"""Domain error taxonomy shared by the asset services.

Services raise these instead of returning status flags. Each error carries the
HTTP status and a machine-readable code so the API layer can map failures 1:1
without collapsing them into a generic 500.
"""


class AssetDeskError(Exception):
    status_code = 400
    code = "error"
    default_detail = "Unable to process request."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(AssetDeskError):
    """Malformed input; nothing was applied."""

    status_code = 400
    code = "validation_error"
    default_detail = "Invalid input."


class Forbidden(AssetDeskError):
    status_code = 403
    code = "forbidden"
    default_detail = "You do not have permission to perform this action."


class NotFound(AssetDeskError):
    status_code = 404
    code = "not_found"
    default_detail = "Not found."


class Conflict(AssetDeskError):
    """The record changed concurrently; re-fetch and retry."""

    status_code = 409
    code = "conflict"
    default_detail = "The resource was modified concurrently."


class InsufficientStock(AssetDeskError):
    status_code = 409
    code = "insufficient_stock"
    default_detail = "Insufficient available quantity."


class InvariantViolation(AssetDeskError):
    """The change would break 0 <= available <= total (or another hard rule)."""

    status_code = 422
    code = "invariant_violation"
    default_detail = "The change would violate a stock invariant."


class Unavailable(AssetDeskError):
    """Persistence timeout or outage; the caller must not assume partial success."""

    status_code = 503
    code = "unavailable"
    default_detail = "Service temporarily unavailable. Please retry."
