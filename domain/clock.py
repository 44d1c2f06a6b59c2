from datetime import datetime, timezone


def to_aware_utc(dt):
    """Normalize any datetime to aware UTC. Naive values are assumed to be UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class Clock:
    """Supplies "now". Read once per top-level invocation, never per row."""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    def __init__(self, at: datetime):
        self.at = to_aware_utc(at)

    def now(self) -> datetime:
        return self.at

    def advance(self, delta):
        self.at = self.at + delta
        return self.at


def to_naive_utc(dt):
    """UTC wall time without tzinfo, for comparisons against naive UTC columns."""
    dt = to_aware_utc(dt)
    return dt.replace(tzinfo=None) if dt else None
