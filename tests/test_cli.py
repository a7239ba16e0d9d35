"""
CLI 테스트.

Mock provider로 전체 실행 흐름 (인자 파싱 → 리포트 생성 → 종료 코드) 검증.
"""

import csv
import os
from unittest.mock import patch

import pytest

from cost_report.cli import build_parser, main, resolve_profiles, split_profiles
from cost_report.config import CostReportSettings, get_settings
from cost_report.services.cost_explorer_provider import MockCostExplorerProvider

# 과거 월을 사용하여 실행 날짜와 무관하게 완료된 월로 집계
MONTH = "2025-06"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("COST_REPORT_PROFILE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestArgumentParsing:
    """인자 파싱 테스트."""

    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.month is None
        assert args.profile is None
        assert args.csv is False

    def test_month_and_profiles(self):
        args = build_parser().parse_args([MONTH, "--profile", "prod,dev", "--profile", "qa"])

        assert args.month.label == MONTH
        assert args.profile == ["prod,dev", "qa"]

    @pytest.mark.parametrize("month", ["2025-13", "June", "2025/06"])
    def test_invalid_month_exits_2(self, month, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([month, "--provider", "mock"])

        assert exc_info.value.code == 2
        assert "expected YYYY-MM" in capsys.readouterr().err

    @pytest.mark.parametrize("threshold", ["0", "-1", "abc"])
    def test_invalid_threshold_exits_2(self, threshold):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--threshold", threshold])

        assert exc_info.value.code == 2


class TestProfileResolution:
    """프로필 결정 테스트."""

    def test_split_profiles(self):
        assert split_profiles(["prod, dev", "prod", " qa ", ","]) == ["prod", "dev", "qa"]

    def test_flag_wins(self):
        with patch.dict(os.environ, {"AWS_PROFILE": "env-profile"}):
            assert resolve_profiles(["prod"], CostReportSettings()) == ["prod"]

    def test_aws_profile_env(self):
        with patch.dict(os.environ, {"AWS_PROFILE": "env-profile"}):
            assert resolve_profiles(None, CostReportSettings()) == ["env-profile"]

    def test_settings_profile(self):
        settings = CostReportSettings(profile="a,b")

        assert resolve_profiles(None, settings) == ["a", "b"]

    def test_default(self):
        assert resolve_profiles(None, CostReportSettings()) == ["default"]


class TestMain:
    """main() 실행 흐름 테스트."""

    def test_generates_report(self, tmp_path, capsys):
        exit_code = main([MONTH, "--provider", "mock", "--output-dir", str(tmp_path)])

        assert exit_code == 0
        reports = list(tmp_path.glob("aws_cost_report_2025-06_default_*.html"))
        assert len(reports) == 1
        assert "AWS Cost Report - June 2025" in reports[0].read_text(encoding="utf-8")

        out = capsys.readouterr().out
        assert "✅ Report generated:" in out
        assert "📊 Total services: 5" in out
        assert "📅 Date range: 2025-06-01 to 2025-06-30" in out
        assert "💰 Total cost: $" in out

    def test_combined_report_with_csv(self, tmp_path):
        exit_code = main(
            [MONTH, "--provider", "mock", "--profile", "prod,dev", "--output-dir", str(tmp_path), "--csv"]
        )

        assert exit_code == 0
        html_files = list(tmp_path.glob("aws_cost_report_2025-06_prod+dev_*.html"))
        assert len(html_files) == 1

        csv_path = html_files[0].with_suffix(".csv")
        with open(csv_path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        # 헤더 + 5개 서비스 (Tax 제외) + TOTAL
        assert len(rows) == 7
        assert rows[0][0] == "Service"
        assert len(rows[0]) == 30 + 2
        assert rows[-1][0] == "TOTAL"

    def test_future_month_fails(self, tmp_path, capsys):
        exit_code = main(["2999-01", "--provider", "mock", "--output-dir", str(tmp_path)])

        assert exit_code == 1
        assert "❌ Error:" in capsys.readouterr().out
        assert list(tmp_path.iterdir()) == []

    def test_credentials_error(self, tmp_path, capsys):
        provider = MockCostExplorerProvider(invalid_profiles=["broken"])

        with patch("cost_report.cli.create_provider", return_value=provider):
            exit_code = main([MONTH, "--provider", "mock", "--profile", "broken", "--output-dir", str(tmp_path)])

        assert exit_code == 1
        out = capsys.readouterr().out
        assert "❌ Error: AWS credentials for profile 'broken'" in out

    def test_list_profiles(self, capsys):
        exit_code = main(["--provider", "mock", "--list-profiles"])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == "default"

    def test_provider_from_settings(self, tmp_path):
        with patch.dict(os.environ, {"COST_REPORT_PROVIDER": "mock", "COST_REPORT_OUTPUT_DIR": str(tmp_path)}):
            exit_code = main([MONTH])

        assert exit_code == 0
        assert len(list(tmp_path.glob("*.html"))) == 1

    def test_unwritable_output_dir(self, tmp_path, capsys):
        """출력 경로가 파일이면 traceback 대신 오류 메시지와 exit 1."""
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("", encoding="utf-8")

        exit_code = main([MONTH, "--provider", "mock", "--output-dir", str(blocker / "reports")])

        assert exit_code == 1
        assert "❌ Error: Failed to write report:" in capsys.readouterr().out

    def test_unwritable_csv(self, tmp_path, capsys):
        provider = MockCostExplorerProvider(identities={"default": "111111111111"})
        (tmp_path / "aws_cost_report_2025-06_default_111111111111.csv").mkdir()

        with patch("cost_report.cli.create_provider", return_value=provider):
            exit_code = main([MONTH, "--provider", "mock", "--output-dir", str(tmp_path), "--csv"])

        assert exit_code == 1
        out = capsys.readouterr().out
        assert "✅ Report generated:" in out
        assert "❌ Error: Failed to write report:" in out

    def test_profiles_with_same_account(self, tmp_path, capsys):
        """default와 AWS_PROFILE이 같은 계정을 가리키면 이중 합산 대신 실패."""
        provider = MockCostExplorerProvider(identities={"default": "111111111111", "prod": "111111111111"})

        with patch("cost_report.cli.create_provider", return_value=provider):
            exit_code = main(
                [MONTH, "--provider", "mock", "--profile", "default,prod", "--output-dir", str(tmp_path)]
            )

        assert exit_code == 1
        assert "resolve to the same account 111111111111" in capsys.readouterr().out
        assert list(tmp_path.iterdir()) == []
