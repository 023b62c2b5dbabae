from datetime import date, datetime, timezone

from ledgerapi.utils.timezone_utils import KST, add_years, is_weekend, to_kst_date


class TestAddYears:
    """달력 기준 연 단위 덧셈 테스트"""

    def test_across_leap_day(self):
        created = datetime(2024, 1, 16, 1, 0, tzinfo=timezone.utc)

        assert add_years(created, 1) == datetime(2025, 1, 16, 1, 0, tzinfo=timezone.utc)

    def test_leap_day_falls_back_to_feb_28(self):
        created = datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)

        assert add_years(created, 1) == datetime(2025, 2, 28, 12, 0, tzinfo=timezone.utc)


class TestKstDate:
    def test_utc_evening_is_next_kst_day(self):
        # 2024-01-19 16:00 UTC = 2024-01-20 01:00 KST (토)
        moment = datetime(2024, 1, 19, 16, 0, tzinfo=timezone.utc)

        assert to_kst_date(moment) == date(2024, 1, 20)
        assert is_weekend(to_kst_date(moment)) is True

    def test_naive_treated_as_utc(self):
        assert to_kst_date(datetime(2024, 1, 16, 14, 59)) == date(2024, 1, 16)
        assert to_kst_date(datetime(2024, 1, 16, 15, 0)) == date(2024, 1, 17)
        assert datetime(2024, 1, 16, 0, 0, tzinfo=KST).utcoffset().total_seconds() == 9 * 3600
