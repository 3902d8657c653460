import uuid
from datetime import datetime, timezone
from typing import Optional


def new_id() -> str:
    """Generate a fresh entity reference."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, the storage format for all timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Convert a datetime to naive UTC; naive input is assumed to be UTC already."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def to_aware_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a stored naive timestamp so it serializes with an explicit offset."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
