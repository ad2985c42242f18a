from datetime import datetime, timezone

from ghworld.utils.utils import (
    clean_message,
    day_bounds_ms,
    day_key,
    month_bounds_ms,
    month_key,
    safe_lower,
    to_epoch_ms
)


def test_clean_message_short():
    assert clean_message(" Hello   world ") == "Hello world"


def test_clean_message_display_width():
    msg = "feat: first line\n\n" + "a" * 300
    cleaned = clean_message(msg, max_length=60)
    assert cleaned.startswith("feat: first line a")
    assert cleaned.endswith("...")
    assert len(cleaned) == 60


def test_clean_message_empty():
    assert clean_message(None) == "N/A"
    assert clean_message("   ", default="No commit message") == "No commit message"


def test_to_epoch_ms_github_format():
    assert to_epoch_ms("2024-05-15T12:30:00Z") == 1715776200000


def test_to_epoch_ms_invalid():
    assert to_epoch_ms("not-a-date") is None
    assert to_epoch_ms(None) is None


def test_safe_lower_normal():
    assert safe_lower("Hello") == "hello"


def test_safe_lower_none():
    assert safe_lower(None) == ""


def test_period_keys():
    moment = datetime(2024, 12, 31, 23, 59, tzinfo=timezone.utc)
    assert month_key(moment) == "2024-12"
    assert day_key(moment) == "2024-12-31"
    assert day_key(1715776200000) == "2024-05-15"


def test_month_bounds_rolls_over_year():
    start, end = month_bounds_ms(datetime(2024, 12, 10, tzinfo=timezone.utc))
    assert start == to_epoch_ms("2024-12-01T00:00:00Z")
    assert end == to_epoch_ms("2025-01-01T00:00:00Z")


def test_day_bounds():
    start, end = day_bounds_ms("2024-05-15")
    assert start == to_epoch_ms("2024-05-15T00:00:00Z")
    assert end - start == 24 * 60 * 60 * 1000
