from datetime import datetime, timezone


def utcnow() -> datetime:
    # naive UTC; SQLite DateTime columns do not keep tzinfo
    return datetime.now(timezone.utc).replace(tzinfo=None)
