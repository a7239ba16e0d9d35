"""
AWS Cost Report CLI.

Cost Explorer 서비스별 일간 비용을 조회하여 인터랙티브 HTML 리포트를 생성합니다.

Usage:
    cost-report                              # Current month, default profile
    cost-report 2026-01                      # January 2026
    cost-report 2026-01 --profile prod       # Specific profile
    cost-report --profile prod,dev           # Combined report for several profiles
    AWS_PROFILE=prod cost-report             # Using environment variable
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from cost_report.config import CostReportSettings, get_settings
from cost_report.exceptions import CostReportError
from cost_report.reports.html_report_generator import (
    build_csv,
    generate_cost_report,
)
from cost_report.services.cost_explorer_provider import (
    DEFAULT_PROFILE,
    BaseCostExplorerProvider,
    check_prerequisites,
    create_provider,
)
from cost_report.services.models import ReportPeriod, WindowType
from cost_report.services.report_builder import CostReportBuilder

logger = logging.getLogger(__name__)


def _month_arg(value: str) -> ReportPeriod:
    try:
        return ReportPeriod.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _threshold_arg(value: str) -> float:
    try:
        threshold = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid threshold '{value}'") from None
    if threshold <= 0:
        raise argparse.ArgumentTypeError("Threshold must be positive")
    return threshold


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cost-report",
        description="Generate an interactive HTML report of AWS costs by service.",
        epilog=(
            "Credentials follow the standard AWS chain: environment variables, "
            "AWS_PROFILE, ~/.aws/credentials, IAM role."
        ),
    )
    parser.add_argument(
        "month",
        nargs="?",
        type=_month_arg,
        help="Month to report as YYYY-MM (default: current month)",
    )
    parser.add_argument(
        "--profile",
        action="append",
        metavar="PROFILE[,PROFILE...]",
        help="AWS profile to use; repeat or comma-separate for a combined report",
    )
    parser.add_argument("--output-dir", type=Path, help="Directory for the report (default: home directory)")
    parser.add_argument("--threshold", type=_threshold_arg, help="Anomaly threshold in standard deviations (default: 2.0)")
    parser.add_argument("--csv", action="store_true", help="Also write the month-to-date matrix as CSV")
    parser.add_argument("--provider", choices=["real", "mock"], help="Cost data provider (default: real)")
    parser.add_argument("--list-profiles", action="store_true", help="List configured AWS profiles and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def split_profiles(values: Iterable[str]) -> List[str]:
    """쉼표 구분 프로필 목록 정규화 (공백 제거, 중복 제거, 순서 유지)."""
    profiles: List[str] = []
    for value in values:
        for name in value.split(","):
            name = name.strip()
            if name and name not in profiles:
                profiles.append(name)
    return profiles


def resolve_profiles(values: Optional[List[str]], settings: CostReportSettings) -> List[str]:
    """프로필 결정: --profile > AWS_PROFILE > 설정 > default."""
    if values:
        profiles = split_profiles(values)
        if profiles:
            return profiles

    fallback = os.getenv("AWS_PROFILE") or settings.profile
    if fallback:
        profiles = split_profiles([fallback])
        if profiles:
            return profiles

    return [DEFAULT_PROFILE]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _create_provider(provider_type: str, settings: CostReportSettings) -> BaseCostExplorerProvider:
    if provider_type == "real":
        check_prerequisites()
        return create_provider("real", region=settings.ce_region)
    return create_provider("mock")


def main(argv: Optional[List[str]] = None) -> int:
    """메인 실행 함수."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    provider_type = args.provider or settings.provider

    try:
        provider = _create_provider(provider_type, settings)

        if args.list_profiles:
            for name in provider.list_profiles():
                print(name)
            return 0

        profiles = resolve_profiles(args.profile, settings)
        period = args.month or ReportPeriod.current()
        windows = period.windows()
        mtd = windows[WindowType.MTD]

        print(f"🔐 AWS Profile{'s' if len(profiles) > 1 else ''}: {', '.join(profiles)}")
        print(f"📊 Generating AWS Cost Report for {period.month_name}")
        print(f"   Date range: {mtd.start} to {mtd.end}")
        print("🔄 Fetching cost data from AWS...")

        builder = CostReportBuilder(
            provider=provider,
            anomaly_threshold=args.threshold or settings.anomaly_threshold,
        )
        report = builder.build(period, profiles)

        for identity in report.profiles:
            print(f"✅ {identity.profile}: {identity.arn or identity.account_id}")
        print("✅ Data fetched successfully")

        print("📝 Generating HTML report...")
        output_dir = args.output_dir or settings.output_dir
        output_path = generate_cost_report(
            report,
            output_dir,
            chart_top_n=settings.chart_top_n,
            currency=settings.currency,
        )

        print(f"✅ Report generated: {output_path}")

        primary = report.primary.mtd
        if args.csv:
            csv_path = output_path.with_suffix(".csv")
            csv_path.write_text(build_csv(primary), encoding="utf-8")
            print(f"📄 CSV exported: {csv_path}")

    except CostReportError as e:
        print(f"❌ Error: {e}")
        return 1
    except ValueError as e:
        print(f"❌ Error: {e}")
        return 1
    except OSError as e:
        print(f"❌ Error: Failed to write report: {e}")
        return 1

    print(f"📊 Total services: {len(primary.services)}")
    print(f"📅 Date range: {primary.dates[0]} to {primary.dates[-1]}")
    print(f"💰 Total cost: ${primary.grand_total:,.2f}")
    print("")
    print(f"🌐 Open report with: open {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
