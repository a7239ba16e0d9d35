"""
Report Styles.

HTML 리포트 공통 스타일 및 색상 상수.
Material Design 3 기반 디자인 시스템.
"""

from dataclasses import dataclass
from typing import Dict, List


# =============================================================================
# Material Design 3 Color Palette
# =============================================================================
MD3_COLORS: Dict[str, str] = {
    # Primary
    "primary": "#1976D2",
    "primary_container": "#E3F2FD",
    "on_primary_container": "#1565C0",

    # Semantic - Error
    "error": "#D32F2F",
    "error_container": "#FFEBEE",
    "on_error_container": "#B71C1C",

    # Semantic - Warning
    "warning": "#F57C00",
    "warning_container": "#FFF3E0",

    # Semantic - Success
    "success": "#388E3C",
    "success_container": "#E8F5E9",

    # Neutral
    "surface": "#FFFFFF",
    "surface_variant": "#F5F5F7",
    "on_surface": "#1D1D1F",
    "on_surface_variant": "#86868B",
    "outline": "#BDBDBD",
    "outline_variant": "#E5E5E7",
}


# =============================================================================
# 비용 수준 (일별 셀 색상)
# =============================================================================
COST_HIGH_THRESHOLD = 50.0
COST_MEDIUM_THRESHOLD = 10.0


# Stacked bar chart palette (top 10 services)
CHART_COLORS: List[str] = [
    "rgba(255, 99, 132, 0.8)",
    "rgba(54, 162, 235, 0.8)",
    "rgba(255, 206, 86, 0.8)",
    "rgba(75, 192, 192, 0.8)",
    "rgba(153, 102, 255, 0.8)",
    "rgba(255, 159, 64, 0.8)",
    "rgba(199, 199, 199, 0.8)",
    "rgba(83, 102, 255, 0.8)",
    "rgba(255, 99, 255, 0.8)",
    "rgba(50, 205, 50, 0.8)",
]


@dataclass
class ReportStyles:
    """리포트 CSS 스타일 (MD3 기반)."""

    # 기본 색상
    primary_color: str = MD3_COLORS["primary"]
    success_color: str = MD3_COLORS["success"]
    warning_color: str = MD3_COLORS["warning"]
    danger_color: str = MD3_COLORS["error"]

    # 배경 색상
    bg_color: str = MD3_COLORS["surface_variant"]
    card_bg_color: str = MD3_COLORS["surface"]

    # 텍스트 색상
    text_color: str = MD3_COLORS["on_surface"]
    text_muted: str = MD3_COLORS["on_surface_variant"]

    # 테두리
    border_color: str = MD3_COLORS["outline_variant"]
    border_radius: str = "12px"

    # 강조 (주말, 이상 탐지)
    weekend_header_bg: str = "#E3F2FD"
    weekend_header_text: str = "#1976D2"
    weekend_cell_bg: str = "#F1F8FF"
    anomaly_bg: str = MD3_COLORS["error_container"]
    anomaly_text: str = MD3_COLORS["on_error_container"]

    # 폰트
    font_family: str = "-apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif"

    def get_base_css(self) -> str:
        """기본 CSS 스타일 반환."""
        return f"""
        * {{
            box-sizing: border-box;
        }}

        body {{
            font-family: {self.font_family};
            margin: 0;
            padding: 20px;
            background: {self.bg_color};
            color: {self.text_color};
        }}

        .container {{
            max-width: 1400px;
            margin: 0 auto;
            background: {self.card_bg_color};
            padding: 30px;
            border-radius: {self.border_radius};
            box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        }}

        .header-title {{
            margin: 0 0 5px 0;
        }}

        .header-subtitle {{
            color: {self.text_muted};
            margin-top: 5px;
        }}

        .nav {{
            display: flex;
            gap: 8px;
            margin: 20px 0;
            flex-wrap: wrap;
            align-items: center;
        }}

        .nav-label {{
            color: {self.text_muted};
            font-size: 13px;
            margin-right: 4px;
        }}

        .nav-item {{
            padding: 6px 14px;
            background: {self.card_bg_color};
            border: 1px solid {self.border_color};
            border-radius: 4px;
            cursor: pointer;
            font-size: 13px;
        }}

        .nav-item.active {{
            background: {self.primary_color};
            color: white;
            border-color: {self.primary_color};
        }}

        .summary {{
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
            gap: 20px;
            margin: 20px 0 40px 0;
        }}

        .summary-card {{
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
            padding: 20px;
            border-radius: 8px;
        }}

        .summary-card.top {{ background: linear-gradient(135deg, #f093fb 0%, #f5576c 100%); }}
        .summary-card.average {{ background: linear-gradient(135deg, #4facfe 0%, #00f2fe 100%); }}
        .summary-card.services {{ background: linear-gradient(135deg, #43e97b 0%, #38f9d7 100%); }}
        .summary-card.forecast {{ background: linear-gradient(135deg, #fa709a 0%, #fee140 100%); }}
        .summary-card.anomalies {{ background: linear-gradient(135deg, #ff5858 0%, #f09819 100%); }}

        .summary-card h3 {{
            margin: 0 0 5px 0;
            font-size: 14px;
            opacity: 0.9;
        }}

        .summary-card p {{
            margin: 0;
            font-size: 28px;
            font-weight: bold;
        }}

        .summary-card small {{
            display: block;
            margin-top: 4px;
            opacity: 0.9;
        }}

        .chart-container {{
            margin: 40px 0;
            height: 500px;
        }}

        .toolbar {{
            display: flex;
            justify-content: space-between;
            align-items: center;
            margin-top: 50px;
        }}

        .button {{
            padding: 8px 16px;
            background: {self.primary_color};
            color: white;
            border: none;
            border-radius: 4px;
            cursor: pointer;
        }}

        .table-wrapper {{
            overflow-x: auto;
            margin-top: 20px;
        }}

        table {{
            width: 100%;
            border-collapse: collapse;
            font-size: 13px;
        }}

        th, td {{
            padding: 10px 8px;
            text-align: right;
            border-bottom: 1px solid {self.border_color};
            white-space: nowrap;
        }}

        th:first-child, td:first-child {{
            text-align: left;
            position: sticky;
            left: 0;
            background: {self.card_bg_color};
            font-weight: 500;
            max-width: 300px;
            overflow: hidden;
            text-overflow: ellipsis;
        }}

        th {{
            background: {self.bg_color};
            font-weight: 600;
            position: sticky;
            top: 0;
            z-index: 10;
            cursor: pointer;
            user-select: none;
        }}

        th.sorted-asc::after {{ content: " \\25B2"; }}
        th.sorted-desc::after {{ content: " \\25BC"; }}

        th.weekend {{
            background: {self.weekend_header_bg};
            color: {self.weekend_header_text};
        }}

        td.weekend {{
            background: {self.weekend_cell_bg};
        }}

        th.anomaly, td.anomaly {{
            background: {self.anomaly_bg};
            color: {self.anomaly_text};
        }}

        tbody tr:hover td:not(:first-child) {{
            background: #fff9e6;
        }}

        .total-row td {{
            font-weight: bold;
            background: #f0f0f2;
        }}

        .cost-high {{ color: {self.danger_color}; font-weight: 600; }}
        .cost-medium {{ color: {self.warning_color}; }}
        .cost-low {{ color: {self.success_color}; }}

        .legend {{
            font-size: 12px;
            color: {self.text_muted};
            margin-top: 10px;
        }}

        .legend span {{
            display: inline-block;
            padding: 2px 8px;
            margin-right: 8px;
            border-radius: 3px;
        }}

        .footer {{
            text-align: center;
            padding-top: 30px;
            color: {self.text_muted};
            font-size: 12px;
        }}
        """
