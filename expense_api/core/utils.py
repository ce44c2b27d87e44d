"""
Utility helpers shared across routers/services.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def not_before(candidate: datetime, previous: Optional[datetime]) -> datetime:
    """
    Return candidate, or previous when the clock went backwards.

    Stored timestamps may carry any offset; comparison is done on aware values.
    """
    if previous is None:
        return candidate
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    return candidate if candidate >= previous else previous
