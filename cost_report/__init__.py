"""
AWS Cost Report.

Per-service daily AWS cost report generator with multi-profile aggregation,
month-end forecast and cost spike detection.
"""

from cost_report.exceptions import (
    CostDataError,
    CostReportError,
    CredentialsError,
    PrerequisiteError,
)
from cost_report.services.report_builder import CostReportBuilder

__version__ = "0.1.0"

__all__ = [
    # Builder
    "CostReportBuilder",
    # Errors
    "CostReportError",
    "CostDataError",
    "CredentialsError",
    "PrerequisiteError",
]
