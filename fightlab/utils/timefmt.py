from datetime import datetime, timezone


def to_iso(dt: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix, the format Swift's .iso8601 decoder accepts."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def ts_to_iso(ts: float) -> str:
    return to_iso(datetime.fromtimestamp(ts, tz=timezone.utc))
