import re
from datetime import date, datetime, timedelta, timezone

DAY_MS = 24 * 60 * 60 * 1000


def clean_message(message, max_length: int = 200, default: str = "N/A") -> str:
    """Collapse whitespace and cut the message down to max_length characters"""
    if not message:
        return default

    cleaned = re.sub(r'\s+', ' ', str(message)).strip()
    if not cleaned:
        return default

    if len(cleaned) > max_length:
        return cleaned[:max_length - 3] + "..."
    return cleaned


def safe_lower(value) -> str:
    if value is None:
        return ""
    return str(value).lower()


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def to_epoch_ms(date_str):
    """Parse an ISO-8601 timestamp (GitHub style, trailing Z) into epoch millis"""
    if not date_str:
        return None
    try:
        parsed = datetime.fromisoformat(str(date_str).replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def from_epoch_ms(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


def utc_day(timestamp_ms: int) -> date:
    return from_epoch_ms(timestamp_ms).date()


def day_key(value) -> str:
    """YYYY-MM-DD for a date, datetime or epoch millis"""
    if isinstance(value, (int, float)):
        value = from_epoch_ms(value)
    return value.strftime('%Y-%m-%d')


def month_key(value) -> str:
    if isinstance(value, (int, float)):
        value = from_epoch_ms(value)
    return value.strftime('%Y-%m')


def month_bounds_ms(moment: datetime):
    """[start, end) of the UTC calendar month containing moment"""
    start = datetime(moment.year, moment.month, 1, tzinfo=timezone.utc)
    if moment.month == 12:
        end = datetime(moment.year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(moment.year, moment.month + 1, 1, tzinfo=timezone.utc)
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)


def day_bounds_ms(day_str: str):
    """[start, end) of a YYYY-MM-DD UTC day"""
    start = datetime.strptime(day_str, '%Y-%m-%d').replace(tzinfo=timezone.utc)
    end = start + timedelta(days=1)
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)
