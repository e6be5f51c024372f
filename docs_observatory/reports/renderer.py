"""
Template Rendering Utilities

Jinja2-based rendering for the HTML dashboard with:
    - Auto-escaping (XSS protection)
    - Custom filters for values, percentages, dates and trend arrows

Usage:
    from docs_observatory.reports.renderer import render_template

    html = render_template("kpi_dashboard.html", {"summary": {...}, "cards": [...]})
"""

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from docs_observatory.core.logging_config import get_logger
from docs_observatory.utils.datetime_utils import parse_iso
from docs_observatory.utils.formatting import format_value

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

_jinja_env: Environment | None = None


def get_jinja_environment() -> Environment:
    """
    Get or create the Jinja2 environment (singleton pattern).

    :returns: Configured Jinja2 Environment with custom filters registered
    """
    global _jinja_env

    if _jinja_env is None:
        _jinja_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

        _jinja_env.filters["metric_value"] = metric_value
        _jinja_env.filters["format_percent"] = format_percent
        _jinja_env.filters["format_date"] = format_date
        _jinja_env.filters["trend_arrow"] = trend_arrow

    return _jinja_env


def render_template(template_name: str, context: dict[str, Any]) -> str:
    """
    Render a template with context data.

    :param template_name: Template file name relative to the templates directory
    :param context: Template variables
    :returns: Rendered HTML
    :raises jinja2.TemplateNotFound: If the template file doesn't exist
    """
    template = get_jinja_environment().get_template(template_name)
    rendered: str = template.render(**context)
    logger.debug("Rendered template", extra={"template": template_name, "size": len(rendered)})
    return rendered


# Custom Jinja2 filters


def metric_value(value: Any, unit: str = "") -> str:
    """
    Value with its unit, or "N/A" when there is no data.

    Example:
        {{ 72.0|metric_value("%") }} -> "72%"
    """
    if value is None:
        return "N/A"
    return f"{format_value(value)}{unit}"


def format_percent(value: Any, decimals: int = 2) -> str:
    """
    Format a number as a percentage string; None renders as "N/A".

    Example:
        {{ 12.5|format_percent }} -> "12.50%"
    """
    if value is None:
        return "N/A"
    try:
        return f"{float(value):.{decimals}f}%"
    except (ValueError, TypeError):
        return str(value)


def format_date(value: Any, format_str: str = "%Y-%m-%d %H:%M:%S UTC") -> str:
    """
    Format a datetime or ISO timestamp string.
    """
    if isinstance(value, datetime):
        return value.strftime(format_str)
    if isinstance(value, str):
        try:
            parsed = parse_iso(value)
        except ValueError:
            return value
        return parsed.strftime(format_str) if parsed else value
    return str(value)


def trend_arrow(direction: str | None) -> str:
    """
    Arrow for a trend direction ("up", "down", "stable").
    """
    return {"up": "↑", "down": "↓", "stable": "→"}.get(direction or "", "")
