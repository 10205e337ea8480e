"""Core utilities shared across extraction, pattern and runtime layers.

Isolating these utilities here keeps a clean dependency graph:

    core <- extraction, icu <- runtime

Exports:
    DepthGuard: Context manager for recursion depth limiting
    DepthLimitExceededError: Exception raised when depth limit exceeded

Python 3.12+.
"""

from .depth_guard import DepthGuard, DepthLimitExceededError

__all__ = ["DepthGuard", "DepthLimitExceededError"]
