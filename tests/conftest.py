"""
Pytest Configuration and Fixtures.

Shared fixtures for the cost report test suite.
"""

import os
from datetime import date, timedelta
from typing import Callable, Dict, List

import pytest

# Set test environment
os.environ.setdefault("COST_REPORT_PROVIDER", "mock")

from cost_report.services.models import (  # noqa: E402
    CostRecord,
    ReportPeriod,
    ReportWindow,
    WindowType,
)


@pytest.fixture
def january_period() -> ReportPeriod:
    """2026년 1월 리포트 기간."""
    return ReportPeriod(year=2026, month=1)


@pytest.fixture
def today_after_january() -> date:
    """1월이 지난 기준일 (1월 전체가 완료됨)."""
    return date(2026, 2, 10)


@pytest.fixture
def january_window() -> ReportWindow:
    """1월 MTD 전체 기간 (31일)."""
    return ReportWindow(WindowType.MTD, date(2026, 1, 1), date(2026, 1, 31))


@pytest.fixture
def short_window() -> ReportWindow:
    """1월 1일 ~ 1월 5일 기간."""
    return ReportWindow(WindowType.MTD, date(2026, 1, 1), date(2026, 1, 5))


@pytest.fixture
def make_records() -> Callable[..., List[CostRecord]]:
    """서비스별 일별 비용 목록으로 CostRecord 생성.

    Usage:
        make_records("prod", {"EC2": [1.0, 2.0]}, start=date(2026, 1, 1))
    """

    def _make(
        profile: str,
        costs: Dict[str, List[float]],
        start: date = date(2026, 1, 1),
    ) -> List[CostRecord]:
        records = []
        for service, amounts in costs.items():
            for offset, amount in enumerate(amounts):
                records.append(
                    CostRecord(
                        profile=profile,
                        service=service,
                        day=start + timedelta(days=offset),
                        amount=amount,
                    )
                )
        return records

    return _make


@pytest.fixture
def sample_ce_response() -> Dict:
    """Cost Explorer GetCostAndUsage 응답 샘플 (3일, 3개 서비스)."""

    def group(service: str, amount: str) -> Dict:
        return {
            "Keys": [service],
            "Metrics": {"UnblendedCost": {"Amount": amount, "Unit": "USD"}},
        }

    return {
        "ResultsByTime": [
            {
                "TimePeriod": {"Start": "2026-01-01", "End": "2026-01-02"},
                "Groups": [
                    group("Amazon Elastic Compute Cloud - Compute", "12.5"),
                    group("Amazon Simple Storage Service", "1.25"),
                    group("Tax", "0"),
                ],
                "Estimated": False,
            },
            {
                "TimePeriod": {"Start": "2026-01-02", "End": "2026-01-03"},
                "Groups": [
                    group("Amazon Elastic Compute Cloud - Compute", "13.5"),
                    group("Amazon Simple Storage Service", "1.75"),
                    group("Tax", "0"),
                ],
                "Estimated": False,
            },
            {
                "TimePeriod": {"Start": "2026-01-03", "End": "2026-01-04"},
                "Groups": [],
                "Estimated": True,
            },
        ]
    }
