"""Time helpers."""

from datetime import datetime
from pytz import UTC


def now() -> int:
    """Get the current epoch/unix time, in milliseconds."""
    return epoch_millis(datetime.now(tz=UTC))


def epoch_millis(t: datetime) -> int:
    """Convert a :class:`.datetime` to UNIX time in milliseconds."""
    delta = t - datetime.fromtimestamp(0, tz=UTC)
    return int(round(delta.total_seconds() * 1000))
