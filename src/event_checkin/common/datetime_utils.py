from __future__ import annotations

from datetime import datetime
from typing import Optional


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock it easier.
    """
    return datetime.now()


def isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
