"""
Cost Analytics.

일별 비용 시계열 기반 분석:
- 월말 비용 예측 (단순 선형 외삽)
- 표준편차 기반 스파이크 탐지 (단방향, 급등만)
- 서비스별 비용 비중
"""

import calendar
import logging
from datetime import date
from typing import Dict, Mapping, Sequence, Set

import numpy as np

from cost_report.services.models import (
    CostSummary,
    ForecastResult,
    ForecastStatus,
    WindowAggregate,
)

logger = logging.getLogger(__name__)

DEFAULT_ANOMALY_THRESHOLD = 2.0
MIN_FORECAST_DAYS = 2
MIN_ANOMALY_POINTS = 3


def forecast_month_end(
    dates: Sequence[date],
    daily_totals: Mapping[date, float],
) -> ForecastResult:
    """경과 일수의 평균 일일 비용으로 월말 총 비용 예측.

    계절성이나 추세 보정 없이 평균 × 해당 월 일수로 계산합니다.

    Args:
        dates: 당월 경과 날짜 (정렬됨)
        daily_totals: 날짜별 총 비용

    Returns:
        ForecastResult
    """
    if not dates:
        return ForecastResult(status=ForecastStatus.NO_FORECAST, elapsed_days=0, month_days=0)

    first = dates[0]
    month_days = calendar.monthrange(first.year, first.month)[1]
    elapsed = len(dates)

    if elapsed < MIN_FORECAST_DAYS:
        return ForecastResult(
            status=ForecastStatus.NO_FORECAST,
            elapsed_days=elapsed,
            month_days=month_days,
        )

    average = sum(daily_totals.get(d, 0.0) for d in dates) / elapsed

    if elapsed >= month_days:
        return ForecastResult(
            status=ForecastStatus.MONTH_COMPLETE,
            elapsed_days=elapsed,
            month_days=month_days,
            average_daily=average,
        )

    return ForecastResult(
        status=ForecastStatus.FORECAST,
        elapsed_days=elapsed,
        month_days=month_days,
        average_daily=average,
        forecast_total=average * month_days,
    )


def detect_anomalies(
    daily_totals: Mapping[date, float],
    threshold: float = DEFAULT_ANOMALY_THRESHOLD,
) -> Set[date]:
    """모집단 평균/표준편차 기반 비용 급등일 탐지.

    amount >= mean + threshold × stddev 이고 amount > mean 인 날짜만 반환합니다.
    비용 급감(dip)은 탐지하지 않습니다.

    Args:
        daily_totals: 날짜별 총 비용
        threshold: 표준편차 배수

    Returns:
        이상 날짜 집합 (데이터 포인트 3개 미만이면 빈 집합)
    """
    if len(daily_totals) < MIN_ANOMALY_POINTS:
        return set()

    days = list(daily_totals)
    values = np.array([daily_totals[d] for d in days], dtype=float)

    mean = float(np.mean(values))
    std = float(np.std(values, ddof=0))  # Population std
    upper_bound = mean + threshold * std

    anomalies = {
        day for day, value in zip(days, values)
        if value >= upper_bound and value > mean
    }

    if anomalies:
        logger.info(
            f"Detected {len(anomalies)} cost spikes "
            f"(mean={mean:.2f}, std={std:.2f}, threshold={threshold})"
        )
    return anomalies


def service_percentages(service_totals: Mapping[str, float]) -> Dict[str, float]:
    """서비스별 전체 대비 비용 비중 (%).

    표시용 반올림은 렌더러에서 수행합니다.
    """
    grand_total = sum(service_totals.values())
    if grand_total <= 0:
        return {name: 0.0 for name in service_totals}
    return {name: total / grand_total * 100 for name, total in service_totals.items()}


def summarize(aggregate: WindowAggregate) -> CostSummary:
    """집계 결과 요약 (총 비용, 최상위 서비스, 일 평균, 서비스 수)."""
    totals = aggregate.service_totals
    grand_total = aggregate.grand_total
    average_daily = grand_total / len(aggregate.dates) if aggregate.dates else 0.0

    summary = CostSummary(
        total_cost=grand_total,
        average_daily=average_daily,
        service_count=len(totals),
    )

    if totals:
        top_service = next(iter(totals))
        summary.top_service = top_service
        summary.top_service_cost = totals[top_service]
        summary.top_service_percentage = service_percentages(totals)[top_service]

    return summary
