from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC; the DB columns store naive UTC so SQLite and Postgres compare alike."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return dt.replace(tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")
