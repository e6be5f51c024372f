"""
Compiler diagnostic classification

Parses type-checker output of the form
``path/file.ts:12:5 - error TS2322: message`` into DebtItems, or, when only
an aggregate error count is known, synthesizes an estimated distribution.
"""

import math
import re
import subprocess
from collections.abc import Sequence
from pathlib import Path

from docs_observatory.core.logging_config import get_logger
from docs_observatory.domain.debt import EFFORT_BY_SEVERITY, TYPESCRIPT_ERROR, DebtItem

logger = get_logger(__name__)

DIAGNOSTIC_RE = re.compile(r"^(.+\.tsx?):(\d+):(\d+) - error (TS\d+): (.+)$")

# Lines of the compiler's trailing summary, never treated as context
SUMMARY_MARKERS = ("Found ", "Errors  Files")

# Checked in order; the first group with a matching pattern wins
SEVERITY_RULES: list[tuple[str, list[re.Pattern[str]]]] = [
    (
        "critical",
        [
            re.compile(r"Type instantiation is excessively deep"),
            re.compile(r"Cannot find module"),
            re.compile(r"Property .* does not exist on type 'never'"),
            re.compile(r"Argument of type .* is not assignable to parameter of type 'never'"),
        ],
    ),
    (
        "high",
        [
            re.compile(r"No overload matches this call"),
            re.compile(r"Property .* is missing in type"),
            re.compile(r"Type .* is not assignable to type"),
        ],
    ),
    (
        "medium",
        [
            re.compile(r"Property .* does not exist on type"),
            re.compile(r"Argument of type .* is not assignable"),
        ],
    ),
]

STATUS_COUNT_PATTERNS = (
    re.compile(r"Total de errores.*?(\d+)", re.IGNORECASE),
    re.compile(r"errores.*?(\d+)", re.IGNORECASE),
    re.compile(r"Total errors.*?(\d+)", re.IGNORECASE),
)

# (category, share of the total, severity, keywords that enable the category)
ESTIMATE_WEIGHTS: list[tuple[str, float, str, tuple[str, ...]]] = [
    ("supabase-types", 0.40, "high", ("supabase", "from(")),
    ("web3-integration", 0.20, "high", ("web3", "viem")),
    ("type-never", 0.15, "critical", ("never",)),
    ("function-overload", 0.15, "medium", ("overload",)),
]
ESTIMATE_REMAINDER = ("general", "low")


def classify_severity(message: str) -> str:
    for severity, patterns in SEVERITY_RULES:
        if any(pattern.search(message) for pattern in patterns):
            return severity
    return "low"


def categorize_error(message: str) -> str:
    if "supabase" in message or "from(" in message:
        return "supabase-types"
    if "web3" in message or "viem" in message or "wagmi" in message:
        return "web3-integration"
    if "never" in message:
        return "type-never"
    if "overload" in message:
        return "function-overload"
    if "missing" in message and "property" in message:
        return "missing-property"
    return "general"


def parse_diagnostics(output: str) -> list[DebtItem]:
    """
    Parse type-checker output into error items.

    Non-empty lines following a diagnostic are attached to it as context,
    except the compiler's summary lines. Lines before the first diagnostic
    are ignored.
    """
    items: list[DebtItem] = []
    current: DebtItem | None = None

    for raw_line in output.splitlines():
        match = DIAGNOSTIC_RE.match(raw_line)
        if match:
            path, line, column, code, message = match.groups()
            message = message.strip()
            severity = classify_severity(message)
            current = DebtItem(
                id=f"ts-{len(items) + 1}",
                type=TYPESCRIPT_ERROR,
                severity=severity,
                file=path,
                line=int(line),
                column=int(column),
                error_code=code,
                message=message,
                category=categorize_error(message),
                estimated_effort=EFFORT_BY_SEVERITY[severity],
            )
            items.append(current)
        elif current is not None and raw_line.strip() and not any(m in raw_line for m in SUMMARY_MARKERS):
            current.context.append(raw_line.strip())

    return items


def read_error_count(status_text: str) -> int | None:
    """Aggregate error count documented in a type-check status file, if any."""
    for pattern in STATUS_COUNT_PATTERNS:
        match = pattern.search(status_text)
        if match:
            return int(match.group(1))
    return None


def estimate_error_distribution(error_count: int, status_text: str) -> list[DebtItem]:
    """
    Synthesize error items from an aggregate count.

    Categories mentioned in ``status_text`` receive a fixed share of the
    count (rounded down); the remainder is ``general``. Every item is
    flagged ``estimated`` because no per-error detail exists.
    """
    distribution: list[tuple[str, str, int]] = []
    allocated = 0
    for category, share, severity, keywords in ESTIMATE_WEIGHTS:
        count = math.floor(error_count * share) if any(k in status_text for k in keywords) else 0
        distribution.append((category, severity, count))
        allocated += count
    remainder_category, remainder_severity = ESTIMATE_REMAINDER
    distribution.append((remainder_category, remainder_severity, max(error_count - allocated, 0)))

    items = []
    for category, severity, count in distribution:
        for _ in range(count):
            items.append(
                DebtItem(
                    id=f"ts-{len(items) + 1}",
                    type=TYPESCRIPT_ERROR,
                    severity=severity,
                    file="Multiple files",
                    error_code="Various",
                    message=f"{category} related error",
                    category=category,
                    estimated_effort=EFFORT_BY_SEVERITY[severity],
                    estimated=True,
                )
            )
    return items


def run_type_check(command: Sequence[str], cwd: str | Path, timeout: float = 600.0) -> str:
    """
    Run the type checker and return its combined output.

    A checker that cannot be started is logged and treated as producing no output.
    """
    try:
        result = subprocess.run(
            list(command),
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"Type check could not run: {e}", extra={"command": " ".join(command)})
        return ""

    logger.info("Type check finished", extra={"command": " ".join(command), "returncode": result.returncode})
    return "\n".join(part for part in (result.stdout, result.stderr) if part)
