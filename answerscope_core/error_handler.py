"""
User-Friendly Error Handler.

Converts low-level browser and network errors into short, readable messages
and decides which failures are worth another attempt.
"""

from typing import Dict, Optional
import logging

from .models import ErrorKind, ExtractionResult

logger = logging.getLogger(__name__)


# Error mappings: pattern -> user-friendly info
ERROR_MAPPINGS = {
    # Network/timeout errors
    "timeout": {
        "message": "The search page took too long to respond",
        "suggestion": "Check the connection or raise the timeout and try again",
        "severity": "warning",
        "can_retry": True
    },
    "net::err_name_not_resolved": {
        "message": "The search host could not be resolved",
        "suggestion": "Check DNS and network connectivity",
        "severity": "error",
        "can_retry": True
    },
    "net::err_internet_disconnected": {
        "message": "No internet connection",
        "suggestion": "Reconnect and try again",
        "severity": "error",
        "can_retry": True
    },
    "connection refused": {
        "message": "The search page refused the connection",
        "suggestion": "Check that the search URL is correct and reachable",
        "severity": "error",
        "can_retry": True
    },
    "net::err": {
        "message": "Network error while loading the search page",
        "suggestion": "Check the connection and try again",
        "severity": "error",
        "can_retry": True
    },

    # Browser errors
    "executable doesn't exist": {
        "message": "The Chromium browser is not installed",
        "suggestion": "Run: python -m playwright install chromium",
        "severity": "critical",
        "can_retry": False
    },
    "target closed": {
        "message": "The browser was closed during extraction",
        "suggestion": "Run the query again",
        "severity": "error",
        "can_retry": True
    },
    "browser has been closed": {
        "message": "The browser was closed during extraction",
        "suggestion": "Run the query again",
        "severity": "error",
        "can_retry": True
    },
}


def format_user_friendly_error(
    error: Exception,
    context: str = "general",
    technical_details: Optional[str] = None
) -> Dict:
    """
    Convert technical error to user-friendly message.

    Returns:
        {
            "message": str,          # User-friendly message
            "suggestion": str,       # Actionable suggestion
            "technical": str,        # Technical details
            "severity": str,         # "critical", "error", "warning"
            "can_retry": bool        # Whether retry might help
        }
    """
    error_str = str(error) or type(error).__name__

    for pattern, friendly_error in ERROR_MAPPINGS.items():
        if pattern in error_str.lower():
            result = friendly_error.copy()
            result["technical"] = technical_details or error_str
            logger.debug(f"Mapped {context} error to: {result['message']}")
            return result

    return {
        "message": "Unexpected error during extraction",
        "suggestion": "Run with ANSWERSCOPE_DEBUG=true and check the log",
        "technical": technical_details or error_str,
        "severity": "error",
        "can_retry": True
    }


def get_error_category(error: Exception) -> str:
    """
    Categorize error type.

    Returns:
        Category name: "network", "browser", "unknown"
    """
    error_str = str(error).lower()

    if isinstance(error, TimeoutError) or any(k in error_str for k in ["timeout", "net::", "connection"]):
        return "network"
    elif any(k in error_str for k in ["browser", "target", "executable"]):
        return "browser"
    else:
        return "unknown"


def format_error_for_logging(error: Exception, context: str = "") -> str:
    """
    Format error for structured logging.

    Args:
        error: The exception
        context: Where in the pipeline it happened

    Returns:
        Formatted error string for logs
    """
    friendly = format_user_friendly_error(error, context)

    lines = [
        f"❌ {friendly['message']}",
        f"💡 {friendly['suggestion']}",
        f"🔧 Technical: {friendly['technical']}",
    ]

    if context:
        lines.insert(0, f"📍 Context: {context} ({get_error_category(error)})")

    return "\n".join(lines)


def failed_result(
    query: str,
    error: Exception,
    kind: ErrorKind,
    context: str,
    exc_info: bool = False,
) -> ExtractionResult:
    """
    Failed ExtractionResult for an exception raised during one extraction.

    The mapped severity picks the log level and the mapped can_retry decides
    whether the retry layer may try again.
    """
    friendly = format_user_friendly_error(error, context)
    level = logging.ERROR if friendly["severity"] == "critical" else logging.WARNING
    logger.log(level, format_error_for_logging(error, context), exc_info=exc_info)
    return ExtractionResult.failed(
        query,
        f"{context.capitalize()} error: {friendly['message']} ({friendly['technical']})",
        kind,
        retryable=friendly["can_retry"],
    )


NO_CONTAINER_MESSAGE = "No AI answer container found on the search page"
INSUFFICIENT_CONTENT_MESSAGE = "AI answer container found but its content is too short ({length} chars, need {floor})"
TIMEOUT_MESSAGE = "Extraction timed out after {timeout_ms} ms"

RETRYABLE_KINDS = frozenset({ErrorKind.NAVIGATION, ErrorKind.TIMEOUT, ErrorKind.BROWSER})


def is_retryable_result(result: ExtractionResult) -> bool:
    """
    Whether another attempt could change a failed result.

    A page that rendered but had no answer is an expected outcome, not a
    transient one. Neither is an error whose mapping says a retry cannot help.
    """
    return (not result.success) and result.error_kind in RETRYABLE_KINDS and result.retryable
