"""API-specific dependencies."""

from .dependencies import (
    get_current_user_id,
    get_document_service,
    get_service_cache,
    get_settings_dependency,
)

__all__ = [
    "get_current_user_id",
    "get_document_service",
    "get_service_cache",
    "get_settings_dependency",
]
