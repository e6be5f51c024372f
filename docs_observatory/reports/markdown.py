"""
Markdown report builders

Each builder assembles a list of lines and joins them; no file I/O happens
here.
"""

from typing import Any

from docs_observatory.debt.classifier import DebtReport
from docs_observatory.domain.debt import DebtItem
from docs_observatory.domain.metrics import EvaluationStatus
from docs_observatory.kpi.catalog import KPICatalog
from docs_observatory.reports.renderer import format_date, metric_value
from docs_observatory.utils.formatting import format_value

ACTION_PLAN_SIZE = 5
TOP_CRITICAL_ERRORS = 10


# ---------------------------------------------------------------------------
# KPI dashboard
# ---------------------------------------------------------------------------


def kpi_dashboard_markdown(dashboard: dict[str, Any], catalog: KPICatalog) -> str:
    """
    Args:
        dashboard: Snapshot from KPIDashboard.generate_dashboard()
        catalog: Metric names, units and targets
    """
    summary = dashboard["summary"]
    counts = summary["statusCounts"]
    trends = dashboard.get("trends") or {}

    lines = [
        "# Documentation KPI Dashboard",
        "",
        f"Generated: {format_date(dashboard['generatedAt'])}",
        "",
        "## Summary",
        "",
        f"- **Overall Health Score**: {summary['healthScore']}",
        f"- **Total KPIs**: {summary['totalKPIs']}",
        f"- **Critical Issues**: {summary['criticalIssues']}",
        f"- **Needs Attention**: {summary['needsAttention']}",
        "",
        "### Status Distribution",
        "",
        f"- 🟢 Excellent: {counts.get('excellent', 0)}",
        f"- 🟡 Good: {counts.get('good', 0)}",
        f"- 🟠 Warning: {counts.get('warning', 0)}",
        f"- 🔴 Critical: {counts.get('critical', 0)}",
        f"- ⚪ No Data: {counts.get('no_data', 0)}",
        "",
    ]

    alerts = dashboard.get("alerts") or []
    if alerts:
        lines.extend(["## 🚨 Active Alerts", ""])
        lines.extend(f"- **{alert['name']}**: {alert['message']}" for alert in alerts)
        lines.append("")

    lines.extend(
        [
            "## KPI Details",
            "",
            "| KPI | Current Value | Target | Status | Trend |",
            "|-----|---------------|--------|--------|-------|",
        ]
    )
    for metric_id, entry in dashboard["evaluation"].items():
        if metric_id not in catalog:
            continue
        metric = catalog[metric_id]
        status = EvaluationStatus(entry["status"])
        trend = trends.get(metric_id)

        if trend and "direction" in trend:
            emoji = "📈" if trend["isImproving"] else "📉"
            change = f"{trend['changePercent']}%" if trend["changePercent"] is not None else "N/A"
            trend_cell = f"{emoji} {change}"
        else:
            trend_cell = "➖ N/A"

        lines.append(
            f"| {metric.name} | {metric_value(entry.get('value'), metric.unit)} | "
            f"{metric_value(metric.target, metric.unit)} | {status.glyph} {status.value} | {trend_cell} |"
        )

    lines.append("")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Onboarding report
# ---------------------------------------------------------------------------


def onboarding_report_markdown(report: dict[str, Any]) -> str:
    """
    Args:
        report: {generatedAt, analytics, rawData} as written to onboarding-report.json
    """
    analytics = report["analytics"]
    lines = [
        "# Developer Onboarding Report",
        "",
        f"Generated: {format_date(report['generatedAt'])}",
        "",
        "## Summary",
        "",
    ]

    summary = analytics.get("summary")
    if summary:
        lines.extend(
            [
                f"- **Total Sessions**: {summary['totalSessions']}",
                f"- **Completed Sessions**: {summary['completedSessions']}",
                f"- **Completion Rate**: {summary['completionRate']}",
                f"- **Average Onboarding Time**: {summary['averageOnboardingTime']} "
                f"({summary['averageOnboardingTimeHours']})",
                "",
            ]
        )
    else:
        lines.extend(
            [
                f"{analytics.get('message', '')}",
                "",
                f"- **Total Sessions**: {analytics.get('totalSessions', 0)}",
                f"- **In Progress**: {analytics.get('inProgress', 0)}",
                "",
            ]
        )

    milestones = analytics.get("milestones")
    if milestones:
        lines.extend(
            [
                "## Milestone Performance",
                "",
                "| Milestone | Completion Rate | Avg Time | Est Time | Variance |",
                "|-----------|----------------|----------|----------|----------|",
            ]
        )
        for m in milestones:
            lines.append(
                f"| {m['name']} | {m['completionRate']}% | {m['averageTime']}min | "
                f"{format_value(m['estimatedTime'])}min | {m['timeVariance']}min |"
            )
        lines.append("")

    feedback = analytics.get("feedback") or {}
    scale_feedback = [f for f in feedback.values() if isinstance(f, dict) and f.get("type") == "scale"]
    if scale_feedback:
        lines.extend(["## Feedback Analysis", ""])
        for f in scale_feedback:
            score = f["averageScore"] if f["averageScore"] is not None else "N/A"
            lines.extend(
                [
                    f"### {f['question']}",
                    f"- **Average Score**: {score}/5",
                    f"- **Responses**: {f['responseCount']}",
                    "",
                ]
            )

    trends = analytics.get("trends") or {}
    if "trend" in trends:
        lines.extend(["## Trend", "", f"- **Direction**: {trends['trend']}"])
        improvement = trends.get("improvement")
        if improvement:
            percentage = improvement["percentage"] if improvement["percentage"] is not None else "N/A"
            lines.append(f"- **First vs Latest Session**: {percentage}% ({improvement['direction']})")
        lines.append("")

    recommendations = analytics.get("recommendations") or []
    if recommendations:
        lines.extend(["## Recommendations", ""])
        for rec in recommendations:
            lines.extend([f"### {rec['type'].upper()} - {rec['priority'].upper()} Priority", "", rec["message"], ""])

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Technical debt report
# ---------------------------------------------------------------------------


def _category_breakdown(errors: list[DebtItem]) -> list[str]:
    stats: dict[str, dict[str, int]] = {}
    for error in errors:
        row = stats.setdefault(error.category, {"count": 0, "critical": 0, "high": 0, "medium": 0, "low": 0})
        row["count"] += 1
        row[error.severity] += 1

    lines = [
        "| Category | Total | Critical | High | Medium | Low |",
        "|----------|-------|----------|------|--------|-----|",
    ]
    for category, row in stats.items():
        lines.append(
            f"| {category} | {row['count']} | {row['critical']} | {row['high']} | {row['medium']} | {row['low']} |"
        )
    return lines


def _task_lines(tasks: list[DebtItem]) -> list[str]:
    lines = []
    for index, task in enumerate(tasks[:ACTION_PLAN_SIZE], start=1):
        lines.extend(
            [
                f"{index}. **{task.type}** - `{task.location}`",
                f"   - {task.message or task.remediation_plan or 'Review and fix'}",
                f"   - Effort: {format_value(task.estimated_effort)}h",
                "",
            ]
        )
    return lines


def debt_report_markdown(report: DebtReport) -> str:
    summary = report.summary

    def share(count: int) -> str:
        return f"{summary.percentage(count):.1f}%"

    lines = [
        "# Technical Debt Analysis Report",
        "",
        f"Generated: {format_date(report.generated_at)}",
        "",
        "## Summary",
        "",
        "| Category | Count | Percentage |",
        "|----------|-------|------------|",
        f"| **Total Items** | {summary.total_items} | 100% |",
        f"| 🔴 Critical | {summary.critical_items} | {share(summary.critical_items)} |",
        f"| 🟡 High Priority | {summary.high_priority_items} | {share(summary.high_priority_items)} |",
        f"| 🟠 Medium Priority | {summary.medium_priority_items} | {share(summary.medium_priority_items)} |",
        f"| 🟢 Low Priority | {summary.low_priority_items} | {share(summary.low_priority_items)} |",
        "",
        f"**Estimated Total Effort:** {format_value(report.total_effort)} hours "
        f"({report.total_effort / 8:.1f} days)",
        "",
        "## Type-Check Issues",
        "",
        f"Total errors: {report.total_errors}",
        "",
    ]
    if report.errors_estimated:
        lines.extend(
            [
                "> Error items are an estimated distribution derived from the documented total, "
                "not per-error diagnostics.",
                "",
            ]
        )

    lines.extend(["### Errors by Category", "", *_category_breakdown(report.errors), ""])

    critical = [e for e in report.errors if e.severity == "critical"][:TOP_CRITICAL_ERRORS]
    lines.extend([f"### Critical Errors (Top {TOP_CRITICAL_ERRORS})", ""])
    for index, error in enumerate(critical, start=1):
        lines.extend(
            [
                f"{index}. `{error.location}` - {error.error_code}",
                f"   - {error.message}",
                f"   - Effort: {format_value(error.estimated_effort)}h",
                "",
            ]
        )
    if not critical:
        lines.extend(["None found.", ""])

    lines.extend(
        [
            "### Suppressions",
            "",
            f"Found {len(report.suppressions)} suppressions that need review:",
            "",
            *(f"- `{s.location}` - {s.suppression}" for s in report.suppressions),
            "",
            "## File Organization Issues",
            "",
            "### Duplicate/Backup Files",
            "",
            *(f"- `{f.file}` ({f.category})" for f in report.duplicates),
            "",
            "### Legacy Files",
            "",
            *(f"- `{f.file}` ({f.category}) - {f.remediation_plan}" for f in report.legacy),
            "",
            "## Prioritized Action Plan",
            "",
        ]
    )

    critical_tasks = [t for t in report.prioritized if t.severity == "critical"]
    high_tasks = [t for t in report.prioritized if t.severity == "high"]
    lines.extend([f"### Phase 1: Critical Issues ({len(critical_tasks)} items)", "", *_task_lines(critical_tasks)])
    lines.extend([f"### Phase 2: High Priority Issues ({len(high_tasks)} items)", "", *_task_lines(high_tasks)])

    lines.extend(["## Recommendations", ""])
    if report.recommendations:
        for rec in report.recommendations:
            lines.append(f"- **{rec.priority.upper()}** ({rec.type}): {rec.message}")
    else:
        lines.append("No outstanding technical debt found.")
    lines.append("")

    return "\n".join(lines)
