"""Core utilities and shared components for prefix-manifest."""

from .config import settings
from .exceptions import (
    ConfigurationError,
    PrefixManifestError,
    TransientStoreError,
    ValidationError,
)
from .observability import get_logger, get_tracer

__all__ = [
    "settings",
    "ConfigurationError",
    "PrefixManifestError",
    "TransientStoreError",
    "ValidationError",
    "get_logger",
    "get_tracer",
]
