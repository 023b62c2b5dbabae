"""
타임존 유틸리티

출석 보상은 한국 시간(KST, UTC+9) 달력 날짜를 기준으로 합니다.
호출자의 로컬 날짜는 사용하지 않습니다.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

# 한국 표준시 (KST = UTC+9)
KST = timezone(timedelta(hours=9))


def get_kst_now() -> datetime:
    """현재 KST 시간을 반환합니다."""
    return datetime.now(KST)


def get_current_kst_date() -> date:
    """현재 KST 날짜를 반환합니다."""
    return get_kst_now().date()


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    DB 에서 읽은 datetime 을 UTC aware 값으로 정규화합니다.

    SQLite 는 tzinfo 를 보존하지 않으므로 naive 값은 UTC 로 저장된 것으로 간주합니다.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_kst(dt: datetime) -> datetime:
    """UTC 또는 다른 타임존의 datetime을 KST로 변환합니다."""
    if dt.tzinfo is None:
        # naive datetime은 UTC로 가정
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(KST)


def to_kst_date(dt: datetime) -> date:
    """주어진 시각의 KST 달력 날짜"""
    return to_kst(dt).date()


def is_weekend(d: date) -> bool:
    """토요일(5) 또는 일요일(6)"""
    return d.weekday() >= 5


def days_between(earlier: date, later: date) -> int:
    """두 날짜 사이의 일수 (later - earlier)"""
    return (later - earlier).days


def add_years(dt: datetime, years: int) -> datetime:
    """달력 기준 연 단위 덧셈 (2월 29일은 평년에서 2월 28일로)"""
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        return dt.replace(year=dt.year + years, day=28)
