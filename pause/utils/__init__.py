"""
Shared utilities for PAUSE.

Common functionality used across contexts:
- Logging and pipeline events
- Subprocess execution
- Resume data loading and escaping
"""

from pause.utils.timestamp import now, now_exact

__all__ = ["now", "now_exact"]
