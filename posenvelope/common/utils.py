# posenvelope/common/utils.py
import hashlib
import time
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1)


def now_ms() -> int:
    return int(time.time() * 1000)


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def format_timestamp(ms: int) -> str:
    """
    Epoch millis -> "yyyy-MM-ddTHH:mm:ss.fff" in UTC, no zone suffix.
    """
    return (_EPOCH + timedelta(milliseconds=ms)).isoformat(timespec="milliseconds")


def parse_timestamp(stamp: str) -> int:
    """
    Inverse of format_timestamp. Stamps without an offset are read as UTC.
    Raises ValueError on anything that is not an ISO-8601 date-time.
    """
    if not isinstance(stamp, str) or not stamp:
        raise ValueError(f"not a timestamp: {stamp!r}")
    if stamp.endswith("Z"):
        stamp = stamp[:-1] + "+00:00"
    dt = datetime.fromisoformat(stamp)
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return (dt - _EPOCH) // timedelta(milliseconds=1)
