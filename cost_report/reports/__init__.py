"""Reports module."""

from cost_report.reports.base import HTMLReportBase
from cost_report.reports.html_report_generator import (
    CostHTMLReportGenerator,
    build_csv,
    generate_cost_report,
    report_filename,
)
from cost_report.reports.styles import ReportStyles

__all__ = [
    "HTMLReportBase",
    "CostHTMLReportGenerator",
    "ReportStyles",
    "build_csv",
    "generate_cost_report",
    "report_filename",
]
