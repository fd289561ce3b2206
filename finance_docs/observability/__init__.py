"""
Observability module.

Provides logging configuration and structured-context logging helpers.
"""

from finance_docs.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from finance_docs.observability.logger import configure_logging
from finance_docs.observability.middleware import RequestLoggingMiddleware

__all__ = [
    "configure_logging",
    "RequestLoggingMiddleware",
    "log_with_context",
    "log_exception_with_context",
    "safe_log_value",
]
