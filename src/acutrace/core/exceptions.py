"""Custom exception classes for the analytics service.

The analytics engine itself never raises for bad data; it degrades to empty
results. These exceptions are for the service boundary, where a payload can
be unusable as a whole. Each exception maps to an error code in errors.py.
"""

from typing import Any


class AnalyticsError(Exception):
    """Base exception for analytics service errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "PAYLOAD_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(error_code)


class PayloadError(AnalyticsError):
    """Raised when an analysis payload cannot be used at all.

    Common causes:
    - Payload is not a JSON object (PAYLOAD_001)
    - Too many transactions for one dashboard view (PAYLOAD_002)
    """

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        super().__init__(error_code, details=details, http_status=422)
