"""
Cost Aggregator.

CostRecord를 서비스 → 날짜 → 비용 형태로 집계합니다.

- 기간 내 총 비용이 0 이하인 서비스 제외
- 총 비용 내림차순 정렬 (동일 비용은 최초 등장 순서 유지)
- 복수 프로필 합산 (combined view)
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Sequence

from cost_report.services.models import (
    CostRecord,
    ProfileDataset,
    ReportWindow,
    WindowAggregate,
)

logger = logging.getLogger(__name__)

COMBINED_PROFILE = "combined"

ServiceSeries = Dict[str, Dict[date, float]]


def aggregate_records(records: Iterable[CostRecord], window: ReportWindow) -> WindowAggregate:
    """기간별 레코드 집계.

    Args:
        records: 일별 서비스 비용 레코드
        window: 집계 기간 (범위 밖 레코드는 무시)

    Returns:
        WindowAggregate
    """
    series: ServiceSeries = {}
    skipped = 0

    for record in records:
        if not window.contains(record.day):
            skipped += 1
            continue
        _add(series, record.service, record.day, record.amount)

    if skipped:
        logger.debug(f"Skipped {skipped} records outside {window.start} to {window.end}")

    return _finalize(series, window)


def combine_aggregates(aggregates: Sequence[WindowAggregate]) -> WindowAggregate:
    """복수 프로필 집계 결과를 (서비스, 날짜) 단위로 합산.

    Args:
        aggregates: 동일 기간의 프로필별 집계 결과 (프로필 순서)

    Returns:
        합산된 WindowAggregate
    """
    if not aggregates:
        raise ValueError("At least one aggregate is required to combine")

    window = aggregates[0].window
    series: ServiceSeries = {}

    for aggregate in aggregates:
        if aggregate.window != window:
            raise ValueError(
                f"Cannot combine windows {aggregate.window.start}..{aggregate.window.end} "
                f"and {window.start}..{window.end}"
            )
        for service, costs in aggregate.services.items():
            for day, amount in costs.items():
                _add(series, service, day, amount)

    return _finalize(series, window)


def combine_datasets(datasets: Sequence[ProfileDataset]) -> ProfileDataset:
    """프로필별 데이터셋을 combined 데이터셋으로 합산."""
    account_ids: List[str] = []
    for dataset in datasets:
        account_ids.extend(a for a in dataset.account_ids if a not in account_ids)

    return ProfileDataset(
        profile=COMBINED_PROFILE,
        account_ids=account_ids,
        mtd=combine_aggregates([d.mtd for d in datasets]),
        ytd=combine_aggregates([d.ytd for d in datasets]),
    )


def _add(series: ServiceSeries, service: str, day: date, amount: float) -> None:
    costs = series.setdefault(service, {})
    costs[day] = costs.get(day, 0.0) + amount


def _finalize(series: ServiceSeries, window: ReportWindow) -> WindowAggregate:
    retained = [(name, costs) for name, costs in series.items() if sum(costs.values()) > 0]
    # sorted() is stable, so equal totals keep encounter order
    retained = sorted(retained, key=lambda item: sum(item[1].values()), reverse=True)

    services = dict(retained)
    dates = window.days
    daily_totals = {
        day: sum(costs.get(day, 0.0) for costs in services.values())
        for day in dates
    }

    dropped = len(series) - len(services)
    if dropped:
        logger.debug(f"Filtered {dropped} services with zero total cost")

    return WindowAggregate(
        window=window,
        services=services,
        dates=dates,
        daily_totals=daily_totals,
    )
