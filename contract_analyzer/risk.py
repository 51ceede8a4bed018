"""
Keyword-based risk classification for extracted clauses.

A deterministic heuristic: the same clause text always gets the same tier,
with no model call involved.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Union

from contract_analyzer.models import Clause, RiskCounts, RiskLevel

# Checked in order; the first set with a hit decides the tier
HIGH_RISK_TERMS: tuple[str, ...] = (
    "termination",
    "liability",
    "indemnification",
    "confidentiality",
    "non-compete",
    "intellectual property",
    "warranty",
    "limitation of liability",
    "damages",
    "breach",
)

MEDIUM_RISK_TERMS: tuple[str, ...] = (
    "payment",
    "fees",
    "penalty",
    "duration",
    "notice period",
    "renewal",
    "modification",
    "amendment",
    "assignment",
    "governing law",
    "jurisdiction",
)

ALL_RISKS = "all"


def classify_risk(title: str, content: str) -> RiskLevel:
    """
    Assign a risk tier to a clause from its title and content.

    Args:
        title: Clause title (may be a synthesized placeholder).
        content: Clause body text.

    Returns:
        RiskLevel.HIGH, RiskLevel.MEDIUM or RiskLevel.LOW.
    """
    title_lower = title.lower()
    content_lower = content.lower()

    def mentions(term: str) -> bool:
        return term in title_lower or term in content_lower

    if any(mentions(term) for term in HIGH_RISK_TERMS):
        return RiskLevel.HIGH
    if any(mentions(term) for term in MEDIUM_RISK_TERMS):
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def count_by_risk(items: Iterable[Clause]) -> RiskCounts:
    """Count items per risk tier."""
    return RiskCounts.tally(items)


def filter_by_risk(
    items: Sequence[Clause],
    selected: Iterable[Union[RiskLevel, str]],
) -> list[Clause]:
    """
    Keep the items whose tier is in ``selected``.

    An empty selection, or one containing "all", keeps every item.
    """
    wanted = {RiskLevel(s).value if s != ALL_RISKS else ALL_RISKS for s in selected}
    if not wanted or ALL_RISKS in wanted:
        return list(items)
    return [item for item in items if RiskLevel(item.risk).value in wanted]
