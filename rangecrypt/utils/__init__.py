"""Utility modules and functions for rangecrypt.

This package combines utility functions from utils_core.py with the timing utilities.
"""

# Explicit imports only - no star imports to avoid namespace pollution
from rangecrypt.utils.timing import async_timing_context  # noqa: F401
from rangecrypt.utils.timing import timing_context  # noqa: F401
from rangecrypt.utils_core import env  # noqa: F401
from rangecrypt.utils_core import to_bool  # noqa: F401


__all__ = [
    # From utils_core.py
    "env",
    "to_bool",
    # From timing.py
    "async_timing_context",
    "timing_context",
]
