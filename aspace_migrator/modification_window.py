"""Modification window - lower bound for "recently modified" resource selection."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from .settings import RECENT_WINDOW_SECONDS


def modified_since(recent_only: bool, now: Optional[datetime] = None) -> int:
    """Return the modified_since cutoff as a UTC Unix timestamp.

    A recent_only run looks back one day (the expected daily cadence);
    otherwise 0 is returned and every resource is considered.
    """
    if not recent_only:
        return 0
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return int((now - timedelta(seconds=RECENT_WINDOW_SECONDS)).timestamp())
