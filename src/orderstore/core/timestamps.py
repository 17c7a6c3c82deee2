"""
Timestamp and token utilities (stdlib-only).

Content records keep every timestamp twice: once in the site's local zone
and once in GMT, both as ``YYYY-MM-DD HH:MM:SS`` text.  The helpers here
convert between those columns and timezone-aware datetimes.

Tags:
    timestamps, utc, datetime, order-store, stdlib-only
"""

import uuid
from datetime import UTC, datetime, tzinfo

STORAGE_FORMAT = "%Y-%m-%d %H:%M:%S"


def utc_now() -> datetime:
    """Get current UTC datetime (second precision, as stored)."""
    return datetime.now(UTC).replace(microsecond=0)


def ensure_aware(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def to_local_string(dt: datetime, zone: tzinfo) -> str:
    """Format *dt* in *zone* for the local timestamp column."""
    return ensure_aware(dt).astimezone(zone).strftime(STORAGE_FORMAT)


def to_gmt_string(dt: datetime) -> str:
    """Format *dt* in UTC for the ``*_gmt`` timestamp column."""
    return ensure_aware(dt).astimezone(UTC).strftime(STORAGE_FORMAT)


def from_gmt_string(value: str | None) -> datetime | None:
    """Parse a ``*_gmt`` column back to an aware UTC datetime."""
    if not value:
        return None
    return datetime.strptime(value, STORAGE_FORMAT).replace(tzinfo=UTC)


def generate_access_nonce(prefix: str = "order_") -> str:
    """Opaque per-record token, e.g. ``order_5f1c2a9b03d4e``."""
    return f"{prefix}{uuid.uuid4().hex[:13]}"
