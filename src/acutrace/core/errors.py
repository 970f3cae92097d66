"""Error codes and user-friendly messages.

This module defines the error catalog for the analytics API.
Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

ERROR_CATALOG: dict[str, dict] = {
    "PAYLOAD_001": {
        "code": "PAYLOAD_001",
        "message": "Analysis payload is missing or not an object",
        "user_message": "We couldn't read the analysis results.",
        "suggestion": "Please re-run the statement analysis and try again.",
        "retry_allowed": False,
    },
    "PAYLOAD_002": {
        "code": "PAYLOAD_002",
        "message": "Analysis payload exceeds the transaction limit",
        "user_message": "This statement has too many transactions to display at once.",
        "suggestion": "Please analyze a shorter statement period.",
        "retry_allowed": False,
    },
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request body failed validation",
        "user_message": "Invalid input data",
        "suggestion": "Please check your input and try again",
        "retry_allowed": True,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred",
        "suggestion": "Please try again later or contact support",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details (a generic entry for unknown codes)
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    return get_error(error_code)["user_message"]


def is_retryable(error_code: str) -> bool:
    return get_error(error_code)["retry_allowed"]
