"""
Cost Report Builder.

프로필별 비용 조회 → 집계 → 분석 파이프라인. 프로필 × 기간마다 순차적으로
Cost Explorer를 1회 호출하며, 실패 시 재시도 없이 예외를 전파합니다.
"""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from cost_report.services.aggregator import aggregate_records, combine_datasets
from cost_report.services.analytics import (
    DEFAULT_ANOMALY_THRESHOLD,
    detect_anomalies,
    forecast_month_end,
    service_percentages,
    summarize,
)
from cost_report.services.cost_explorer_provider import BaseCostExplorerProvider
from cost_report.services.models import (
    CostReport,
    ProfileDataset,
    ProfileIdentity,
    ReportPeriod,
    ViewAnalytics,
    WindowAggregate,
    WindowType,
)

logger = logging.getLogger(__name__)


class CostReportBuilder:
    """
    비용 리포트 빌더.

    Usage:
        builder = CostReportBuilder(provider=create_provider("real"))
        report = builder.build(ReportPeriod.parse("2026-01"), ["prod", "dev"])
    """

    def __init__(
        self,
        provider: BaseCostExplorerProvider,
        anomaly_threshold: float = DEFAULT_ANOMALY_THRESHOLD,
    ):
        """빌더 초기화.

        Args:
            provider: Cost Explorer provider
            anomaly_threshold: 이상 탐지 표준편차 배수
        """
        self.provider = provider
        self.anomaly_threshold = anomaly_threshold

    def build(
        self,
        period: ReportPeriod,
        profiles: Sequence[str],
        today: Optional[date] = None,
    ) -> CostReport:
        """리포트 생성.

        Args:
            period: 리포트 대상 월
            profiles: AWS 프로필 목록 (순서 유지)
            today: 기준일 (테스트용)

        Returns:
            CostReport
        """
        if not profiles:
            raise ValueError("At least one profile is required")

        windows = period.windows(today)
        identities: List[ProfileIdentity] = []
        datasets: Dict[str, ProfileDataset] = {}

        for profile in profiles:
            identity = self.provider.get_identity(profile)
            self._check_distinct_account(identity, identities)
            identities.append(identity)

            aggregates: Dict[WindowType, WindowAggregate] = {}
            for window_type, window in windows.items():
                records = self.provider.get_cost_records(profile, window)
                aggregates[window_type] = aggregate_records(records, window)

            datasets[profile] = ProfileDataset(
                profile=profile,
                account_ids=[identity.account_id],
                mtd=aggregates[WindowType.MTD],
                ytd=aggregates[WindowType.YTD],
            )
            logger.info(
                f"Aggregated profile {profile}: "
                f"{len(datasets[profile].mtd.services)} services (MTD), "
                f"{len(datasets[profile].ytd.services)} services (YTD)"
            )

        combined = combine_datasets(list(datasets.values())) if len(datasets) > 1 else None

        analytics = {profile: self.analyze(dataset) for profile, dataset in datasets.items()}
        combined_analytics = self.analyze(combined) if combined is not None else None

        return CostReport(
            period=period,
            profiles=identities,
            datasets=datasets,
            analytics=analytics,
            combined=combined,
            combined_analytics=combined_analytics,
            generated_at=datetime.now(),
        )

    @staticmethod
    def _check_distinct_account(identity: ProfileIdentity, resolved: Sequence[ProfileIdentity]) -> None:
        """같은 계정으로 해석되는 프로필 중복 방지 (combined 뷰 이중 합산).

        Raises:
            ValueError: 이미 조회한 프로필과 계정 ID가 같은 경우
        """
        for other in resolved:
            if other.account_id == identity.account_id:
                raise ValueError(
                    f"Profiles '{other.profile}' and '{identity.profile}' resolve to the same "
                    f"account {identity.account_id}; costs would be counted twice"
                )

    def analyze(self, dataset: ProfileDataset) -> Dict[WindowType, ViewAnalytics]:
        """데이터셋의 MTD/YTD 분석. 월말 예측은 MTD에만 적용."""
        result: Dict[WindowType, ViewAnalytics] = {}

        for window_type in (WindowType.MTD, WindowType.YTD):
            aggregate = dataset.window(window_type)
            forecast = None
            if window_type == WindowType.MTD:
                forecast = forecast_month_end(aggregate.dates, aggregate.daily_totals)

            result[window_type] = ViewAnalytics(
                summary=summarize(aggregate),
                percentages=service_percentages(aggregate.service_totals),
                anomalies=detect_anomalies(aggregate.daily_totals, self.anomaly_threshold),
                forecast=forecast,
            )

        return result
