"""
Cost Report Models.

데이터 모델 및 열거형 정의.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Set


class WindowType(str, Enum):
    """집계 기간 타입."""

    MTD = "mtd"  # Month-to-date
    YTD = "ytd"  # Year-to-date


class ForecastStatus(str, Enum):
    """월말 예측 상태."""

    FORECAST = "forecast"
    NO_FORECAST = "no_forecast"  # 데이터 부족 (2일 미만)
    MONTH_COMPLETE = "month_complete"


@dataclass(frozen=True)
class CostRecord:
    """Cost Explorer 일별 서비스 비용 레코드."""

    profile: str
    service: str
    day: date
    amount: float


@dataclass(frozen=True)
class ReportWindow:
    """집계 기간 (start, end 모두 포함)."""

    window_type: WindowType
    start: date
    end: date

    @property
    def end_exclusive(self) -> date:
        """Cost Explorer End 파라미터용 (exclusive)."""
        return self.end + timedelta(days=1)

    @property
    def days(self) -> List[date]:
        """start부터 end까지 연속된 날짜 목록."""
        count = (self.end - self.start).days + 1
        return [self.start + timedelta(days=i) for i in range(count)]

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class ReportPeriod:
    """리포트 대상 월."""

    year: int
    month: int

    @classmethod
    def parse(cls, value: str) -> "ReportPeriod":
        """YYYY-MM 문자열 파싱.

        Args:
            value: 월 문자열 (예: 2026-01)

        Returns:
            ReportPeriod

        Raises:
            ValueError: 형식이 잘못된 경우
        """
        try:
            parsed = datetime.strptime(value.strip(), "%Y-%m")
        except ValueError:
            raise ValueError(f"Invalid month '{value}', expected YYYY-MM") from None
        return cls(year=parsed.year, month=parsed.month)

    @classmethod
    def current(cls, today: Optional[date] = None) -> "ReportPeriod":
        today = today or date.today()
        return cls(year=today.year, month=today.month)

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def month_name(self) -> str:
        """표시용 월 이름 (예: January 2026)."""
        return date(self.year, self.month, 1).strftime("%B %Y")

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def windows(self, today: Optional[date] = None) -> Dict[WindowType, ReportWindow]:
        """MTD/YTD 집계 기간 계산.

        현재 월이면 오늘까지, 지난 월이면 말일까지 집계합니다.

        Args:
            today: 기준일 (테스트용, 기본: 오늘)

        Returns:
            WindowType별 ReportWindow

        Raises:
            ValueError: 미래 월인 경우
        """
        today = today or date.today()
        if self.first_day > today:
            raise ValueError(f"Month {self.label} is in the future")

        end = min(self.last_day, today)
        return {
            WindowType.MTD: ReportWindow(WindowType.MTD, self.first_day, end),
            WindowType.YTD: ReportWindow(WindowType.YTD, date(self.year, 1, 1), end),
        }


@dataclass(frozen=True)
class ProfileIdentity:
    """프로필별 STS caller identity."""

    profile: str
    account_id: str
    arn: str = ""


@dataclass
class WindowAggregate:
    """기간별 서비스 × 날짜 비용 집계 결과.

    services는 총 비용 내림차순으로 정렬되어 있으며,
    총 비용이 0인 서비스는 포함되지 않습니다.
    """

    window: ReportWindow
    services: Dict[str, Dict[date, float]]
    dates: List[date]
    daily_totals: Dict[date, float]

    @property
    def service_totals(self) -> Dict[str, float]:
        return {name: sum(costs.values()) for name, costs in self.services.items()}

    @property
    def grand_total(self) -> float:
        return sum(self.daily_totals.values())


@dataclass
class ProfileDataset:
    """프로필(또는 combined)별 MTD/YTD 데이터셋."""

    profile: str
    account_ids: List[str]
    mtd: WindowAggregate
    ytd: WindowAggregate

    def window(self, window_type: WindowType) -> WindowAggregate:
        return self.mtd if window_type == WindowType.MTD else self.ytd


@dataclass
class ForecastResult:
    """월말 비용 예측 결과."""

    status: ForecastStatus
    elapsed_days: int
    month_days: int
    average_daily: float = 0.0
    forecast_total: Optional[float] = None


@dataclass
class CostSummary:
    """집계 요약 (리포트 상단 카드)."""

    total_cost: float
    average_daily: float
    service_count: int
    top_service: Optional[str] = None
    top_service_cost: float = 0.0
    top_service_percentage: float = 0.0


@dataclass
class ViewAnalytics:
    """뷰(프로필 × 기간)별 분석 결과."""

    summary: CostSummary
    percentages: Dict[str, float]
    anomalies: Set[date] = field(default_factory=set)
    forecast: Optional[ForecastResult] = None


@dataclass
class CostReport:
    """최종 비용 리포트.

    datasets와 analytics는 원래 프로필 이름으로만 키를 가지며,
    combined 뷰는 별도 필드(combined, combined_analytics)에 보관합니다.
    """

    period: ReportPeriod
    profiles: List[ProfileIdentity]
    datasets: Dict[str, ProfileDataset]
    analytics: Dict[str, Dict[WindowType, ViewAnalytics]]
    combined: Optional[ProfileDataset] = None
    combined_analytics: Optional[Dict[WindowType, ViewAnalytics]] = None
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def primary(self) -> ProfileDataset:
        """기본 표시 데이터셋 (복수 프로필이면 combined)."""
        if self.combined is not None:
            return self.combined
        return next(iter(self.datasets.values()))

    @property
    def primary_analytics(self) -> Dict[WindowType, ViewAnalytics]:
        if self.combined_analytics is not None:
            return self.combined_analytics
        return next(iter(self.analytics.values()))

    @property
    def account_ids(self) -> List[str]:
        return [identity.account_id for identity in self.profiles]
