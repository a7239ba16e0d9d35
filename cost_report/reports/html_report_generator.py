"""
HTML Report Generator for AWS Cost Reports.

서비스별 일간 비용 리포트를 단일 HTML 파일로 생성합니다.

Features:
- 요약 카드 (총 비용, 최상위 서비스 비중, 일 평균, 서비스 수, 월말 예측, 이상 탐지)
- 상위 10개 서비스 누적 막대 차트 (Chart.js)
- 정렬 가능한 서비스 × 날짜 테이블 (주말/이상 날짜 강조)
- 프로필(combined 포함) × 기간(MTD/YTD) 뷰 전환
- 현재 표시 중인 테이블 CSV 내보내기
"""

import csv
import html
import io
import json
import logging
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from cost_report.reports.base import HTMLReportBase
from cost_report.reports.styles import (
    CHART_COLORS,
    COST_HIGH_THRESHOLD,
    COST_MEDIUM_THRESHOLD,
    ReportStyles,
)
from cost_report.services.models import (
    CostReport,
    ForecastResult,
    ProfileDataset,
    ViewAnalytics,
    WindowAggregate,
    WindowType,
)

logger = logging.getLogger(__name__)

CHART_JS_URL = "https://cdn.jsdelivr.net/npm/chart.js@4.4.0/dist/chart.umd.min.js"

WINDOW_LABELS = {
    WindowType.MTD: "Month-to-Date",
    WindowType.YTD: "Year-to-Date",
}

COMBINED_VIEW_KEY = "combined"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _safe_name(value: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("-", value)


def profile_view_key(profile: str) -> str:
    """프로필 뷰 키. combined 뷰 키와 겹치지 않도록 접두사를 붙입니다."""
    return f"profile:{profile}"


def report_filename(report: CostReport, extension: str = "html") -> str:
    """리포트 파일명 생성.

    aws_cost_report_<YYYY-MM>_<profiles>_<account ids>.<extension>
    """
    profiles = "+".join(_safe_name(identity.profile) for identity in report.profiles)
    accounts = "+".join(_safe_name(account_id) for account_id in report.account_ids)
    return f"aws_cost_report_{report.period.label}_{profiles}_{accounts}.{extension}"


def build_csv(aggregate: WindowAggregate) -> str:
    """서비스 × 날짜 행렬 CSV 직렬화.

    헤더 `Service,<dates...>,Total`, 서비스별 1행, 마지막 TOTAL 행.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(["Service"] + [d.isoformat() for d in aggregate.dates] + ["Total"])
    for service, costs in aggregate.services.items():
        row = [f"{costs.get(d, 0.0):.2f}" for d in aggregate.dates]
        writer.writerow([service] + row + [f"{sum(costs.values()):.2f}"])

    totals = [f"{aggregate.daily_totals.get(d, 0.0):.2f}" for d in aggregate.dates]
    writer.writerow(["TOTAL"] + totals + [f"{aggregate.grand_total:.2f}"])

    return buffer.getvalue()


def dump_script_json(payload: Any) -> str:
    """<script> 블록에 안전하게 삽입 가능한 JSON 문자열."""
    return (
        json.dumps(payload, ensure_ascii=False)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


class CostHTMLReportGenerator(HTMLReportBase):
    """
    비용 리포트 HTML 생성기.

    모든 뷰 데이터를 JSON으로 문서에 포함하고, 클라이언트 JS가 선택된 뷰를 렌더링합니다.

    Usage:
        generator = CostHTMLReportGenerator()
        path = generator.generate_report(report, output_dir / report_filename(report))
    """

    def __init__(
        self,
        chart_top_n: int = 10,
        currency: str = "USD",
        styles: Optional[ReportStyles] = None,
    ):
        """리포트 생성기 초기화.

        Args:
            chart_top_n: 차트에 표시할 상위 서비스 수
            currency: 통화 표시
            styles: 스타일 설정
        """
        super().__init__(title="AWS Cost Report", styles=styles)
        self.chart_top_n = chart_top_n
        self.currency = currency

    def get_head_extra(self) -> str:
        return f'<script src="{CHART_JS_URL}"></script>'

    def render(self, data: CostReport) -> str:
        self.title = f"AWS Cost Report - {data.period.month_name}"
        return super().render(data)

    def generate_content(self, data: CostReport) -> str:
        report = data
        payload = self.build_payload(report)

        view_items = [
            {"label": view["label"], "value": view["key"], "active": view["key"] == payload["defaultView"]}
            for view in payload["profiles"]
        ]
        window_items = [
            {"label": label, "value": window_type.value, "active": window_type == WindowType.MTD}
            for window_type, label in WINDOW_LABELS.items()
        ]

        profile_nav = self.render_nav("Profile:", view_items, "view") if len(view_items) > 1 else ""
        window_nav = self.render_nav("Period:", window_items, "window")

        identities = ", ".join(
            f"{identity.profile} ({identity.account_id})" for identity in report.profiles
        )

        return f"""
        <h1 class="header-title">AWS Cost Report</h1>
        <p class="header-subtitle">{html.escape(report.period.month_name)} &bull;
            <span id="window-label">{WINDOW_LABELS[WindowType.MTD]}</span> Analysis &bull;
            {html.escape(identities)}</p>

        {profile_nav}
        {window_nav}

        <div class="summary" id="summary"></div>

        <div class="chart-container">
            <canvas id="dailyCostChart"></canvas>
        </div>

        <div class="toolbar">
            <h2 id="table-title">All AWS Services - Daily Breakdown</h2>
            <button type="button" class="button" id="export-csv">Export CSV</button>
        </div>
        <div class="legend">
            <span class="weekend-sample" style="background: {self.styles.weekend_header_bg};">Weekend</span>
            <span class="anomaly-sample" style="background: {self.styles.anomaly_bg};">Cost spike</span>
            Click a column header to sort.
        </div>
        <div class="table-wrapper">
            <table id="cost-table">
                <thead></thead>
                <tbody></tbody>
            </table>
        </div>
        <noscript><p>JavaScript is required to display this report.</p></noscript>

        <footer class="footer">
            <p>Generated at {report.generated_at.strftime('%Y-%m-%d %H:%M:%S')} &bull; Metric: UnblendedCost</p>
        </footer>

        <script>
        const REPORT = {dump_script_json(payload)};
        {_REPORT_SCRIPT}
        </script>
        """

    def build_payload(self, report: CostReport) -> Dict[str, Any]:
        """클라이언트 렌더링용 데이터 구조 생성.

        Args:
            report: 비용 리포트

        Returns:
            JSON 직렬화 가능한 딕셔너리
        """
        entries: List[tuple] = []
        if report.combined is not None and report.combined_analytics is not None:
            entries.append((COMBINED_VIEW_KEY, "Combined", "combined", report.combined, report.combined_analytics))
        for profile, dataset in report.datasets.items():
            entries.append((profile_view_key(profile), profile, profile, dataset, report.analytics[profile]))

        profiles = []
        views: Dict[str, Dict[str, Any]] = {}
        for key, label, name, dataset, analytics in entries:
            profiles.append({"key": key, "label": label, "name": name, "accounts": dataset.account_ids})
            views[key] = {
                window_type.value: self.build_view(dataset, window_type, analytics[window_type])
                for window_type in (WindowType.MTD, WindowType.YTD)
            }

        return {
            "month": report.period.label,
            "monthName": report.period.month_name,
            "currency": self.currency,
            "chartTopN": self.chart_top_n,
            "colors": CHART_COLORS,
            "costThresholds": {"high": COST_HIGH_THRESHOLD, "medium": COST_MEDIUM_THRESHOLD},
            "defaultView": entries[0][0],
            "profiles": profiles,
            "views": views,
        }

    def build_view(
        self,
        dataset: ProfileDataset,
        window_type: WindowType,
        analytics: ViewAnalytics,
    ) -> Dict[str, Any]:
        """단일 뷰(프로필 × 기간) 데이터."""
        aggregate = dataset.window(window_type)
        summary = analytics.summary

        services = [
            {
                "name": name,
                "costs": [round(costs.get(d, 0.0), 6) for d in aggregate.dates],
                "total": round(sum(costs.values()), 6),
                "percentage": round(analytics.percentages.get(name, 0.0), 1),
            }
            for name, costs in aggregate.services.items()
        ]

        return {
            "window": window_type.value,
            "windowLabel": WINDOW_LABELS[window_type],
            "dates": [d.isoformat() for d in aggregate.dates],
            "weekends": [_is_weekend(d) for d in aggregate.dates],
            "anomalies": sorted(d.isoformat() for d in analytics.anomalies),
            "services": services,
            "dailyTotals": [round(aggregate.daily_totals.get(d, 0.0), 6) for d in aggregate.dates],
            "total": round(aggregate.grand_total, 6),
            "summary": {
                "totalCost": round(summary.total_cost, 2),
                "averageDaily": round(summary.average_daily, 2),
                "serviceCount": summary.service_count,
                "topService": summary.top_service,
                "topServiceCost": round(summary.top_service_cost, 2),
                "topServicePercentage": round(summary.top_service_percentage, 1),
            },
            "forecast": _forecast_to_dict(analytics.forecast),
        }


def _is_weekend(day: date) -> bool:
    return day.weekday() >= 5  # 5=Saturday, 6=Sunday


def _forecast_to_dict(forecast: Optional[ForecastResult]) -> Optional[Dict[str, Any]]:
    if forecast is None:
        return None
    return {
        "status": forecast.status.value,
        "elapsedDays": forecast.elapsed_days,
        "monthDays": forecast.month_days,
        "averageDaily": round(forecast.average_daily, 2),
        "total": round(forecast.forecast_total, 2) if forecast.forecast_total is not None else None,
    }


def generate_cost_report(
    report: CostReport,
    output_dir: Path,
    chart_top_n: int = 10,
    currency: str = "USD",
) -> Path:
    """편의 함수: 리포트를 output_dir에 결정적 파일명으로 저장.

    Returns:
        생성된 HTML 파일 경로
    """
    generator = CostHTMLReportGenerator(chart_top_n=chart_top_n, currency=currency)
    return generator.generate_report(report, Path(output_dir) / report_filename(report))


_REPORT_SCRIPT = r"""
        const state = { view: REPORT.defaultView, window: 'mtd', sortKey: 'total', sortDir: 'desc' };
        let chart = null;

        function currentView() {
            return REPORT.views[state.view][state.window];
        }

        function money(value) {
            return '$' + value.toLocaleString('en-US', { minimumFractionDigits: 2, maximumFractionDigits: 2 });
        }

        function costClass(value) {
            const limits = REPORT.costThresholds;
            return value > limits.high ? 'cost-high' : (value > limits.medium ? 'cost-medium' : 'cost-low');
        }

        function sortedServices(view) {
            const rows = view.services.slice();
            if (state.sortKey === 'total' && state.sortDir === 'desc') {
                return rows;
            }
            const dir = state.sortDir === 'asc' ? 1 : -1;
            const index = view.dates.indexOf(state.sortKey);
            rows.sort(function (a, b) {
                if (state.sortKey === 'service') {
                    return dir * a.name.localeCompare(b.name);
                }
                const av = index >= 0 ? a.costs[index] : a.total;
                const bv = index >= 0 ? b.costs[index] : b.total;
                return dir * (av - bv);
            });
            return rows;
        }

        function card(cls, title, value, note) {
            const el = document.createElement('div');
            el.className = 'summary-card ' + cls;
            const h3 = document.createElement('h3');
            h3.textContent = title;
            const p = document.createElement('p');
            p.textContent = value;
            el.appendChild(h3);
            el.appendChild(p);
            if (note) {
                const small = document.createElement('small');
                small.textContent = note;
                el.appendChild(small);
            }
            return el;
        }

        function renderSummary(view) {
            const summary = view.summary;
            const container = document.getElementById('summary');
            container.innerHTML = '';
            container.appendChild(card('', 'Total Cost', money(summary.totalCost)));
            if (summary.topService) {
                container.appendChild(card('top', 'Top Service', money(summary.topServiceCost),
                    summary.topService + ' (' + summary.topServicePercentage.toFixed(1) + '%)'));
            }
            container.appendChild(card('average', 'Avg Daily Cost', money(summary.averageDaily)));
            container.appendChild(card('services', 'Services', String(summary.serviceCount)));

            const forecast = view.forecast;
            if (forecast) {
                if (forecast.status === 'forecast') {
                    container.appendChild(card('forecast', 'Month-End Forecast', money(forecast.total),
                        'Based on ' + forecast.elapsedDays + ' of ' + forecast.monthDays + ' days'));
                } else if (forecast.status === 'month_complete') {
                    container.appendChild(card('forecast', 'Month-End Forecast', 'Month complete'));
                } else {
                    container.appendChild(card('forecast', 'Month-End Forecast', 'Not enough data',
                        'Needs at least 2 days'));
                }
            }
            container.appendChild(card('anomalies', 'Cost Spikes', String(view.anomalies.length),
                view.anomalies.length ? view.anomalies.join(', ') : 'No unusual days'));
        }

        function renderChart(view) {
            const labels = view.dates.map(function (d) { return state.window === 'mtd' ? d.slice(5) : d; });
            const datasets = view.services.slice(0, REPORT.chartTopN).map(function (service, idx) {
                const color = REPORT.colors[idx % REPORT.colors.length];
                return {
                    label: service.name.slice(0, 40),
                    data: service.costs,
                    backgroundColor: color,
                    borderColor: color.replace('0.8', '1'),
                    borderWidth: 1
                };
            });

            if (chart) {
                chart.destroy();
            }
            if (typeof Chart === 'undefined') {
                return;
            }
            chart = new Chart(document.getElementById('dailyCostChart'), {
                type: 'bar',
                data: { labels: labels, datasets: datasets },
                options: {
                    responsive: true,
                    maintainAspectRatio: false,
                    interaction: { mode: 'index', intersect: false },
                    plugins: {
                        legend: { position: 'top', labels: { boxWidth: 12, padding: 10 } },
                        title: {
                            display: true,
                            text: 'Daily Cost Breakdown - Top ' + REPORT.chartTopN + ' Services (Stacked)',
                            font: { size: 16 }
                        },
                        tooltip: {
                            callbacks: {
                                label: function (context) {
                                    return context.dataset.label + ': $' + context.parsed.y.toFixed(2);
                                },
                                footer: function (items) {
                                    let total = 0;
                                    items.forEach(function (item) { total += item.parsed.y; });
                                    return 'Total: $' + total.toFixed(2);
                                }
                            }
                        }
                    },
                    scales: {
                        x: { stacked: true },
                        y: {
                            stacked: true,
                            beginAtZero: true,
                            ticks: { callback: function (value) { return '$' + value.toFixed(0); } }
                        }
                    }
                }
            });
        }

        function cell(tag, text, cls, title) {
            const el = document.createElement(tag);
            el.textContent = text;
            if (cls) { el.className = cls; }
            if (title) { el.title = title; }
            return el;
        }

        function headerCell(text, key, cls) {
            let classes = cls || '';
            if (state.sortKey === key) {
                classes += ' sorted-' + state.sortDir;
            }
            const th = cell('th', text, classes.trim());
            th.addEventListener('click', function () {
                if (state.sortKey === key) {
                    state.sortDir = state.sortDir === 'desc' ? 'asc' : 'desc';
                } else {
                    state.sortKey = key;
                    state.sortDir = key === 'service' ? 'asc' : 'desc';
                }
                renderTable(currentView());
            });
            return th;
        }

        function dateClasses(view, idx) {
            const classes = [];
            if (view.weekends[idx]) { classes.push('weekend'); }
            if (view.anomalies.indexOf(view.dates[idx]) >= 0) { classes.push('anomaly'); }
            return classes.join(' ');
        }

        function renderTable(view) {
            const table = document.getElementById('cost-table');
            const thead = table.querySelector('thead');
            const tbody = table.querySelector('tbody');
            thead.innerHTML = '';
            tbody.innerHTML = '';

            const headRow = document.createElement('tr');
            headRow.appendChild(headerCell('Service', 'service'));
            view.dates.forEach(function (d, idx) {
                headRow.appendChild(headerCell(state.window === 'mtd' ? d.slice(5) : d, d, dateClasses(view, idx)));
            });
            headRow.appendChild(headerCell('Total', 'total'));
            thead.appendChild(headRow);

            sortedServices(view).forEach(function (service) {
                const row = document.createElement('tr');
                row.appendChild(cell('td', service.name.slice(0, 70), '', service.name + ' (' + service.percentage.toFixed(1) + '%)'));
                service.costs.forEach(function (cost, idx) {
                    const classes = (costClass(cost) + ' ' + dateClasses(view, idx)).trim();
                    row.appendChild(cell('td', cost > 0 ? cost.toFixed(2) : '-', classes));
                });
                row.appendChild(cell('td', money(service.total)));
                tbody.appendChild(row);
            });

            const totalRow = document.createElement('tr');
            totalRow.className = 'total-row';
            totalRow.appendChild(cell('td', 'TOTAL'));
            view.dailyTotals.forEach(function (total, idx) {
                totalRow.appendChild(cell('td', money(total), dateClasses(view, idx)));
            });
            totalRow.appendChild(cell('td', money(view.total)));
            tbody.appendChild(totalRow);
        }

        function csvField(value) {
            const text = String(value);
            if (/[",\n\r]/.test(text)) {
                return '"' + text.replace(/"/g, '""') + '"';
            }
            return text;
        }

        function exportCsv() {
            const view = currentView();
            const lines = [];
            lines.push(['Service'].concat(view.dates, ['Total']).map(csvField).join(','));
            sortedServices(view).forEach(function (service) {
                const values = service.costs.map(function (c) { return c.toFixed(2); });
                lines.push([service.name].concat(values, [service.total.toFixed(2)]).map(csvField).join(','));
            });
            const totals = view.dailyTotals.map(function (t) { return t.toFixed(2); });
            lines.push(['TOTAL'].concat(totals, [view.total.toFixed(2)]).map(csvField).join(','));

            const blob = new Blob([lines.join('\n') + '\n'], { type: 'text/csv;charset=utf-8' });
            const link = document.createElement('a');
            const viewName = REPORT.profiles.find(function (p) { return p.key === state.view; }).name;
            link.href = URL.createObjectURL(blob);
            link.download = 'aws_cost_report_' + REPORT.month + '_' + viewName.replace(/[^A-Za-z0-9._-]/g, '-') + '_' + state.window + '.csv';
            document.body.appendChild(link);
            link.click();
            document.body.removeChild(link);
        }

        function render() {
            const view = currentView();
            document.getElementById('window-label').textContent = view.windowLabel;
            renderSummary(view);
            renderChart(view);
            renderTable(view);
        }

        document.querySelectorAll('.nav-item').forEach(function (button) {
            button.addEventListener('click', function () {
                const group = button.getAttribute('data-group');
                state[group] = button.getAttribute('data-value');
                document.querySelectorAll('.nav-item[data-group="' + group + '"]').forEach(function (other) {
                    other.classList.toggle('active', other === button);
                });
                render();
            });
        });
        document.getElementById('export-csv').addEventListener('click', exportCsv);

        render();
"""
