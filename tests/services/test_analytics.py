"""
Cost Analytics 테스트.

월말 예측, 비용 급등 탐지, 서비스 비중, 요약 검증.
"""

from datetime import date, timedelta

import pytest

from cost_report.services.aggregator import aggregate_records
from cost_report.services.analytics import (
    detect_anomalies,
    forecast_month_end,
    service_percentages,
    summarize,
)
from cost_report.services.models import ForecastStatus


def _days(start: date, count: int):
    return [start + timedelta(days=i) for i in range(count)]


class TestForecastMonthEnd:
    """월말 비용 예측 테스트."""

    def test_no_dates(self):
        result = forecast_month_end([], {})

        assert result.status == ForecastStatus.NO_FORECAST
        assert result.forecast_total is None

    def test_single_day_has_no_forecast(self):
        """1일치 데이터로는 예측하지 않음."""
        day = date(2026, 4, 1)

        result = forecast_month_end([day], {day: 10.0})

        assert result.status == ForecastStatus.NO_FORECAST
        assert result.elapsed_days == 1
        assert result.month_days == 30
        assert result.forecast_total is None

    def test_ten_of_thirty_days(self):
        """30일 월 중 10일 경과, 일 $10 → 월말 $300."""
        dates = _days(date(2026, 4, 1), 10)
        totals = {d: 10.0 for d in dates}

        result = forecast_month_end(dates, totals)

        assert result.status == ForecastStatus.FORECAST
        assert result.elapsed_days == 10
        assert result.month_days == 30
        assert result.average_daily == pytest.approx(10.0)
        assert result.forecast_total == pytest.approx(300.0)

    def test_uses_days_in_calendar_month(self):
        """2월(28일)은 28일 기준으로 예측."""
        dates = _days(date(2026, 2, 1), 2)
        totals = {dates[0]: 1.0, dates[1]: 3.0}

        result = forecast_month_end(dates, totals)

        assert result.month_days == 28
        assert result.forecast_total == pytest.approx(56.0)

    def test_complete_month(self):
        """월 전체 데이터면 예측 대신 month complete."""
        dates = _days(date(2026, 1, 1), 31)
        totals = {d: 5.0 for d in dates}

        result = forecast_month_end(dates, totals)

        assert result.status == ForecastStatus.MONTH_COMPLETE
        assert result.forecast_total is None
        assert result.average_daily == pytest.approx(5.0)

    def test_missing_totals_count_as_zero(self):
        dates = _days(date(2026, 4, 1), 2)

        result = forecast_month_end(dates, {dates[0]: 20.0})

        assert result.average_daily == pytest.approx(10.0)
        assert result.forecast_total == pytest.approx(300.0)


class TestDetectAnomalies:
    """표준편차 기반 비용 급등 탐지 테스트."""

    def test_flags_only_the_spike(self):
        """[10, 10, 10, 10, 100] → 100만 탐지."""
        dates = _days(date(2026, 1, 1), 5)
        totals = dict(zip(dates, [10.0, 10.0, 10.0, 10.0, 100.0]))

        anomalies = detect_anomalies(totals, threshold=2.0)

        assert anomalies == {date(2026, 1, 5)}

    def test_fewer_than_three_points(self):
        """데이터 포인트 3개 미만이면 빈 집합."""
        dates = _days(date(2026, 1, 1), 2)

        assert detect_anomalies(dict(zip(dates, [1.0, 1000.0]))) == set()
        assert detect_anomalies({}) == set()

    def test_constant_series_has_no_anomalies(self):
        """표준편차 0이면 평균 초과 값이 없으므로 탐지 없음."""
        totals = {d: 7.0 for d in _days(date(2026, 1, 1), 10)}

        assert detect_anomalies(totals) == set()

    def test_dips_are_not_flagged(self):
        """비용 급감은 탐지하지 않음."""
        dates = _days(date(2026, 1, 1), 5)
        totals = dict(zip(dates, [100.0, 100.0, 100.0, 100.0, 0.0]))

        assert detect_anomalies(totals, threshold=1.0) == set()

    def test_threshold_is_configurable(self):
        """낮은 threshold는 더 많은 날짜를 탐지."""
        dates = _days(date(2026, 1, 1), 6)
        totals = dict(zip(dates, [10.0, 10.0, 10.0, 10.0, 20.0, 40.0]))

        strict = detect_anomalies(totals, threshold=2.0)
        loose = detect_anomalies(totals, threshold=0.25)

        assert strict == {date(2026, 1, 6)}
        assert loose == {date(2026, 1, 5), date(2026, 1, 6)}


class TestServicePercentages:
    """서비스별 비용 비중 테스트."""

    def test_percentages(self):
        result = service_percentages({"EC2": 75.0, "S3": 25.0})

        assert result["EC2"] == pytest.approx(75.0)
        assert result["S3"] == pytest.approx(25.0)

    def test_sum_to_hundred(self):
        result = service_percentages({"A": 1.0, "B": 2.0, "C": 4.0})

        assert sum(result.values()) == pytest.approx(100.0)

    def test_zero_grand_total(self):
        """총 비용 0이면 모든 비중 0."""
        assert service_percentages({"EC2": 0.0}) == {"EC2": 0.0}
        assert service_percentages({}) == {}


class TestSummarize:
    """집계 요약 테스트."""

    def test_summary(self, make_records, short_window):
        records = make_records("prod", {"S3": [1.0, 1.0], "EC2": [5.0, 5.0, 5.0, 3.0]})
        aggregate = aggregate_records(records, short_window)

        summary = summarize(aggregate)

        assert summary.total_cost == pytest.approx(20.0)
        assert summary.service_count == 2
        assert summary.top_service == "EC2"
        assert summary.top_service_cost == pytest.approx(18.0)
        assert summary.top_service_percentage == pytest.approx(90.0)
        # 5일 기간 (데이터 없는 날 포함)
        assert summary.average_daily == pytest.approx(4.0)

    def test_empty_aggregate(self, short_window):
        summary = summarize(aggregate_records([], short_window))

        assert summary.total_cost == 0.0
        assert summary.service_count == 0
        assert summary.top_service is None
