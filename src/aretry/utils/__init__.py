r"""Utility functions for the retry engine.

This package provides parameter normalization helpers and opt-in
structured logging utilities.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BASE_DELAY",
    "StructuredFormatter",
    "correlation_id",
    "log_structured",
    "normalize_base_delay",
    "normalize_max_attempts",
]

from aretry.utils.structured_logging import StructuredFormatter, correlation_id, log_structured
from aretry.utils.validation import (
    DEFAULT_BASE_DELAY,
    normalize_base_delay,
    normalize_max_attempts,
)
