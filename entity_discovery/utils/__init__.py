"""Utility modules for the entity discovery pipeline."""

from entity_discovery.utils.http import HTTPError, RateLimitError, build_retrying
from entity_discovery.utils.logging import setup_logging

__all__ = [
    # HTTP utilities
    "HTTPError",
    "RateLimitError",
    "build_retrying",
    # Logging
    "setup_logging",
]
