"""Report rendering: Markdown line builders and the Jinja2 HTML dashboard."""

from docs_observatory.reports.markdown import debt_report_markdown, kpi_dashboard_markdown, onboarding_report_markdown
from docs_observatory.reports.renderer import render_template

__all__ = ["debt_report_markdown", "kpi_dashboard_markdown", "onboarding_report_markdown", "render_template"]
