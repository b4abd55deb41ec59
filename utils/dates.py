# percetakan/utils/dates.py

from datetime import date, datetime, timedelta
from typing import List, Optional

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Ags", "Sep", "Okt", "Nov", "Des"]


def today_iso() -> str:
    """Local calendar day as YYYY-MM-DD."""
    return date.today().isoformat()


def parse_iso(value: str) -> Optional[date]:
    try:
        return datetime.strptime((value or "")[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def last_n_days(today: str, n: int = 30) -> List[str]:
    """
    The `n` ISO dates ending at `today` (inclusive), oldest first.
    """
    end = parse_iso(today)
    if end is None:
        raise ValueError(f"Invalid ISO date: {today!r}")
    return [(end - timedelta(days=i)).isoformat() for i in range(n - 1, -1, -1)]


def day_month_label(value: str) -> str:
    d = parse_iso(value)
    return d.strftime("%d/%m") if d else value


def format_date(value: str) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY; anything unparseable comes back unchanged."""
    d = parse_iso(value)
    return d.strftime("%d/%m/%Y") if d else value


def year_of(value: str) -> Optional[int]:
    d = parse_iso(value)
    return d.year if d else None


def month_index(value: str) -> Optional[int]:
    """0-based month, or None for an unparseable date."""
    d = parse_iso(value)
    return d.month - 1 if d else None


def in_range(value: str, start: Optional[str], end: Optional[str]) -> bool:
    """
    Inclusive whole-day range check on ISO strings. Blank bounds are open.
    """
    if start and value < start:
        return False
    if end and value > end:
        return False
    return True


def month_range(year_month: str) -> tuple[str, str]:
    """'2024-02' -> ('2024-02-01', '2024-02-29')"""
    year, month = int(year_month[:4]), int(year_month[5:7])
    first = date(year, month, 1)
    nxt = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return first.isoformat(), (nxt - timedelta(days=1)).isoformat()


def year_range(year: int) -> tuple[str, str]:
    return f"{year}-01-01", f"{year}-12-31"


def current_month_range(today: Optional[str] = None) -> tuple[str, str]:
    return month_range((today or today_iso())[:7])


def add_days(value: str, days: int) -> str:
    """ISO date `days` after `value`. Raises ValueError for an unparseable date."""
    d = parse_iso(value)
    if d is None:
        raise ValueError(f"Invalid ISO date: {value!r}")
    return (d + timedelta(days=days)).isoformat()
