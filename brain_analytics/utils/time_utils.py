import os
from datetime import datetime

import pytz
from pytz import timezone

# Zone used for calendar features (day of week, hour, day of year)
APP_TZ = timezone(os.getenv("APP_TIMEZONE", "UTC"))


def get_current_time() -> datetime:
    """Get current time in the application timezone."""
    return datetime.now(APP_TZ)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value


def to_local(value: datetime) -> datetime:
    """Convert a timestamp to the application timezone."""
    return ensure_aware(value).astimezone(APP_TZ)


def from_epoch_millis(value: float) -> datetime:
    """Build an aware datetime from epoch milliseconds."""
    return datetime.fromtimestamp(value / 1000.0, tz=pytz.utc)
