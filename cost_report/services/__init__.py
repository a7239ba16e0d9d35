"""
Cost Report Services.

Service modules for cost fetching, aggregation and analytics.
"""

from cost_report.services.aggregator import (
    aggregate_records,
    combine_aggregates,
    combine_datasets,
)
from cost_report.services.analytics import (
    detect_anomalies,
    forecast_month_end,
    service_percentages,
    summarize,
)
from cost_report.services.cost_explorer_provider import (
    BaseCostExplorerProvider,
    CostExplorerProvider,
    MockCostExplorerProvider,
    create_provider,
    parse_cost_response,
)
from cost_report.services.models import (
    CostRecord,
    CostReport,
    ForecastResult,
    ForecastStatus,
    ProfileDataset,
    ReportPeriod,
    ReportWindow,
    WindowAggregate,
    WindowType,
)
from cost_report.services.report_builder import CostReportBuilder

__all__ = [
    "aggregate_records",
    "combine_aggregates",
    "combine_datasets",
    "detect_anomalies",
    "forecast_month_end",
    "service_percentages",
    "summarize",
    "BaseCostExplorerProvider",
    "CostExplorerProvider",
    "MockCostExplorerProvider",
    "create_provider",
    "parse_cost_response",
    "CostRecord",
    "CostReport",
    "ForecastResult",
    "ForecastStatus",
    "ProfileDataset",
    "ReportPeriod",
    "ReportWindow",
    "WindowAggregate",
    "WindowType",
    "CostReportBuilder",
]
