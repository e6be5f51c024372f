"""
Documentation Observatory - KPI, onboarding and technical debt analytics

Turns periodic snapshots of documentation state, developer onboarding
sessions and source-tree scans into ranked, explainable findings.

Packages:
    - domain: dataclasses for metrics, onboarding sessions and debt items
    - kpi: threshold evaluation, trends, alerts and the measurement store
    - onboarding: session state machine and analytics
    - debt: pattern-based technical debt classification
    - reports: Markdown and HTML report rendering
"""

__version__ = "1.0.0"
