"""Exception hierarchy shared by services and API handlers.

Services raise these types; ``consultant_hub.main`` maps each one to an HTTP
status code and a ``{"error": ...}`` body in a single place.
"""

from typing import Any, Dict, Optional


class ConsultantHubError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ConsultantHubError):
    """Input failed a length, required-field, date-order or ownership rule.

    Args:
        message: Human-readable explanation, returned verbatim to the caller.
        details: Optional field-level breakdown (field name -> problem).
    """

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.details = details or {}
        super().__init__(message)


class NotFoundError(ConsultantHubError):
    """A requested record does not exist (a valid "absent" state, not a crash)."""

    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        self.resource = resource
        self.resource_id = resource_id
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} {resource_id} not found"
        super().__init__(message)


class UnauthorizedError(ConsultantHubError):
    """No valid session accompanies the request."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ConfigurationError(ConsultantHubError):
    """A required setting (e.g. the gateway API key) is missing."""

    status_code = 500


class DispatchError(ConsultantHubError):
    """Base class for completion gateway failures.

    ``user_message`` is safe to show to end users; upstream error text is only
    ever written to logs.
    """

    status_code = 502
    user_message = "AI gateway error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.user_message)


class RateLimited(DispatchError):
    status_code = 429
    user_message = "Rate limit exceeded. Please try again later."


class PaymentRequired(DispatchError):
    status_code = 402
    user_message = "Payment required. Please add credits to your AI workspace."


class GatewayError(DispatchError):
    """Upstream returned a non-2xx status other than 429/402."""

    def __init__(self, upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        super().__init__()


class TransportError(DispatchError):
    """Network failure, timeout or an unparseable gateway response."""

    user_message = "Could not reach the AI gateway. Please try again."

    def __init__(self, reason: Optional[str] = None, timed_out: bool = False):
        self.reason = reason
        self.timed_out = timed_out
        if timed_out:
            self.status_code = 504
        super().__init__()
