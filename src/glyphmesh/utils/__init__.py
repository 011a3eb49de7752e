"""Utility functions for glyphmesh.

This module provides utility functions including:

- Logging setup and configuration
- Batch statistics and progress logging
"""

from glyphmesh.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
