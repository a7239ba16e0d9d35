"""
HTML Report Base.

HTML 리포트 공통 베이스 클래스.
"""

import html
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from cost_report.reports.styles import ReportStyles

logger = logging.getLogger(__name__)


class HTMLReportBase(ABC):
    """
    HTML 리포트 베이스 클래스.

    공통 스타일 및 레이아웃 제공. 하위 클래스에서 리포트 본문을 구현합니다.
    """

    def __init__(
        self,
        title: str = "Report",
        styles: Optional[ReportStyles] = None,
    ):
        """리포트 베이스 초기화.

        Args:
            title: 리포트 제목
            styles: 스타일 설정
        """
        self.title = title
        self.styles = styles or ReportStyles()

    @abstractmethod
    def generate_content(self, data: Any) -> str:
        """리포트 콘텐츠 생성 (서브클래스에서 구현).

        Args:
            data: 리포트 데이터

        Returns:
            HTML 콘텐츠
        """
        pass

    def get_head_extra(self) -> str:
        """<head>에 추가할 요소 (스크립트 등)."""
        return ""

    def render(self, data: Any) -> str:
        """전체 HTML 문서 생성."""
        return self._wrap_html(self.generate_content(data))

    def generate_report(self, data: Any, output_path: Path) -> Path:
        """HTML 리포트를 파일로 저장.

        Args:
            data: 리포트 데이터
            output_path: 출력 파일 경로

        Returns:
            저장된 파일 경로
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render(data), encoding="utf-8")

        logger.info(f"Report saved to: {output_path}")
        return output_path

    def _wrap_html(self, content: str) -> str:
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(self.title)}</title>
    {self.get_head_extra()}
    <style>
        {self.styles.get_base_css()}
    </style>
</head>
<body>
    <div class="container">
        {content}
    </div>
</body>
</html>"""

    def render_nav(self, label: str, items: List[Dict[str, Any]], group: str) -> str:
        """버튼형 네비게이션 렌더링.

        Args:
            label: 네비게이션 레이블
            items: [{"label": "...", "value": "...", "active": True/False}, ...]
            group: data-group 속성 (JS 이벤트 바인딩용)

        Returns:
            HTML 문자열
        """
        buttons = []
        for item in items:
            active_class = " active" if item.get("active") else ""
            buttons.append(
                f'<button type="button" class="nav-item{active_class}" '
                f'data-group="{html.escape(group)}" data-value="{html.escape(item["value"])}">'
                f'{html.escape(item["label"])}</button>'
            )

        return f"""
        <nav class="nav">
            <span class="nav-label">{html.escape(label)}</span>
            {''.join(buttons)}
        </nav>
        """
