from datetime import UTC, date, datetime, timedelta, tzinfo

# Samples ending at or after this local hour belong to the next morning's night
NIGHT_ROLLOVER_HOUR = 14


def minute_index(ts: datetime) -> int:
    """Whole minutes since the epoch; naive values are indexed as UTC wall-clock."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return int(ts.timestamp() // 60)


def night_date_for(end: datetime, tz: tzinfo | None = None) -> str:
    local_end = end.astimezone(tz) if tz is not None and end.tzinfo is not None else end
    night = local_end.date()
    if local_end.hour >= NIGHT_ROLLOVER_HOUR:
        night += timedelta(days=1)
    return night.strftime("%Y-%m-%d")


def recent_window(days: int, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return (start, end) covering the last `days` days up to `now` (UTC)."""
    end = now or datetime.now(UTC)
    return end - timedelta(days=max(0, int(days))), end


def first_day_of_window(days: int, today: date | None = None) -> str:
    today = today or datetime.now(UTC).date()
    return (today - timedelta(days=max(1, int(days)) - 1)).strftime("%Y-%m-%d")
