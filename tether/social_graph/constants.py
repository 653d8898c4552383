"""
Social graph domain: limits.
"""
from __future__ import annotations

# Maximum number of entries returned by the "non-followed users" suggestion list
SUGGESTION_LIMIT: int = 5
