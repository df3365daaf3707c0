from datetime import datetime

from src.common.current_datetime import get_current_datetime, to_utc


def format_relative_time(moment: datetime, now: datetime | None = None) -> str:
    """Short relative label for a task timestamp ("Just now", "5m ago", "2h ago").

    Anything a week old or more is shown as its calendar date.
    """
    now = to_utc(now) if now is not None else get_current_datetime()
    minutes = int((now - to_utc(moment)).total_seconds() // 60)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"

    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"

    days = hours // 24
    if days < 7:
        return f"{days}d ago"

    return to_utc(moment).date().isoformat()
