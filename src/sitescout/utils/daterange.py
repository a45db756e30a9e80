# src/sitescout/utils/daterange.py
from __future__ import annotations
from datetime import date
from typing import Optional, Tuple


def yyyymmdd(d: date) -> str:
    return d.strftime("%Y%m%d")


def months_ago(months: int, *, today: Optional[date] = None) -> date:
    """
    오늘 기준 N개월 전 같은 날짜.
    해당 월에 그 날짜가 없으면(예: 3/31 → 2/31) 넘친 일수만큼 다음 달로 이월.
    """
    today = today or date.today()
    total = today.year * 12 + (today.month - 1) - months
    year, month = divmod(total, 12)
    month += 1

    day = today.day
    while True:
        try:
            return date(year, month, day)
        except ValueError:
            # 말일 초과 → 다음 달 1일부터 남은 일수만큼
            overflow = day - _days_in_month(year, month)
            year, month = (year + 1, 1) if month == 12 else (year, month + 1)
            day = overflow


def _days_in_month(year: int, month: int) -> int:
    nxt = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return (nxt - date(year, month, 1)).days


def months_back_range(months: int, *, today: Optional[date] = None) -> Tuple[str, str]:
    """[오늘-N개월, 오늘] 을 YYYYMMDD 문자열로."""
    today = today or date.today()
    return yyyymmdd(months_ago(months, today=today)), yyyymmdd(today)


def previous_year_range(*, today: Optional[date] = None) -> Tuple[str, str]:
    """직전 한 해 전체 (1/1 ~ 12/31)."""
    year = (today or date.today()).year - 1
    return f"{year}0101", f"{year}1231"


def resolve_range(start: Optional[str], end: Optional[str], *, today: Optional[date] = None) -> Tuple[str, str]:
    # 둘 중 하나라도 없으면 직전 연도 전체로 대체
    if not start or not end:
        return previous_year_range(today=today)
    return start, end
