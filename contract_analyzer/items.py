"""
Bullet-item segmentation for the list-bearing report sections.

The "Key Clauses" and "Risks & Red Flags" sections are bullet lists written by
a model, so marker styles are mixed (``-``, ``*``, ``•``, ``1.``) and items
often carry indented sub-bullets. Segmentation falls back to paragraphs when
no bullets are present, and to a single placeholder item when the section is
empty but the report itself is not, so the UI never shows an empty list next
to a long report.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from contract_analyzer.models import Clause, ItemKind, RiskLevel
from contract_analyzer.risk import classify_risk
from contract_analyzer.sections import normalize_markdown

logger = logging.getLogger(__name__)

BULLET_PATTERN = re.compile(r"^(?P<indent>[ \t]*)(?:[-*•]|\d+\.)[ \t]+(?P<text>\S.*)$")
PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")

# Reports at or below this length do not get placeholder items
PLACEHOLDER_MIN_DOCUMENT_LENGTH = 100

CATEGORY_KEY_CLAUSE = "Key Clause"
CATEGORY_RISK = "Risk"
CATEGORY_GENERAL = "General"
CATEGORY_ERROR = "Error"

_BULLET_LABELS = {ItemKind.CLAUSE: "Clause", ItemKind.RISK: "Risk"}
_PARAGRAPH_LABELS = {ItemKind.CLAUSE: "Key Clause", ItemKind.RISK: "Risk"}

_PLACEHOLDERS = {
    ItemKind.CLAUSE: Clause(
        id="1",
        title="Contract Overview",
        content=(
            "The document has been analyzed, but specific clauses could not be "
            "extracted. Please see the full report tab for complete details."
        ),
        category=CATEGORY_GENERAL,
        risk=RiskLevel.MEDIUM,
    ),
    ItemKind.RISK: Clause(
        id="risk-1",
        title="Potential Risk",
        content=(
            "The document has been analyzed, but specific risks could not be "
            "extracted. Please see the full report tab for complete details."
        ),
        category=CATEGORY_RISK,
        risk=RiskLevel.MEDIUM,
    ),
}


def _indent_width(indent: str) -> int:
    return len(indent.expandtabs(4))


def split_bullets(body: str) -> list[list[str]]:
    """
    Group the lines of ``body`` into top-level bullet runs.

    A bullet at the shallowest bullet indentation starts a run. Deeper bullets
    and plain text lines continue the current run; a blank line ends it.
    Each run is a list of stripped lines with the leading marker removed from
    the first one.
    """
    lines = body.split("\n")
    indents = []
    for line in lines:
        match = BULLET_PATTERN.match(line)
        if match:
            indents.append(_indent_width(match.group("indent")))
    if not indents:
        return []

    top_level = min(indents)
    runs: list[list[str]] = []
    current: Optional[list[str]] = None

    for line in lines:
        if not line.strip():
            if current is not None:
                runs.append(current)
                current = None
            continue

        match = BULLET_PATTERN.match(line)
        if match and _indent_width(match.group("indent")) <= top_level:
            if current is not None:
                runs.append(current)
            current = [match.group("text").strip()]
        elif current is not None:
            current.append(line.strip())

    if current is not None:
        runs.append(current)
    return runs


def split_title(run: list[str]) -> tuple[str, str]:
    """
    Split a bullet run into ``(title, content)``.

    The title is the text before a colon on the first line. Returns an empty
    title when the first line has no usable colon.
    """
    first, rest = run[0], run[1:]
    head, sep, tail = first.partition(":")
    title = head.strip().strip("*_").strip()

    # "https://..." is not a title separator
    if not sep or not title or tail.startswith("//"):
        return "", "\n".join(run).strip()

    tail = tail.strip()
    # "**Termination:** text" leaves the closing bold marker on the tail
    for marker in ("**", "__"):
        if head.count(marker) % 2 == 1 and tail.startswith(marker):
            tail = tail[len(marker):].strip()

    content = "\n".join(part for part in [tail, *rest] if part).strip()
    return title, content or title


def _make_item(kind: ItemKind, index: int, title: str, content: str) -> Clause:
    if kind is ItemKind.RISK:
        # The risks section only lists flagged issues
        return Clause(
            id=f"risk-{index}",
            title=title,
            content=content,
            category=CATEGORY_RISK,
            risk=RiskLevel.HIGH,
        )
    return Clause(
        id=str(index),
        title=title,
        content=content,
        category=CATEGORY_KEY_CLAUSE,
        risk=classify_risk(title, content),
    )


def placeholder_item(kind: Union[ItemKind, str]) -> Clause:
    """The synthetic item used when a non-trivial report yields no items."""
    return _PLACEHOLDERS[ItemKind(kind)]


def segment_items(
    section_body: str,
    kind: Union[ItemKind, str],
    document_length: int = 0,
) -> list[Clause]:
    """
    Split a section body into discrete, risk-scored items.

    Args:
        section_body: Trimmed body of the key clauses or risks section.
        kind: Which section the body came from.
        document_length: Length of the whole normalized report; a placeholder
            item is returned when nothing was found and this exceeds 100.

    Returns:
        Items in source order.
    """
    kind = ItemKind(kind)
    body = normalize_markdown(section_body)
    items: list[Clause] = []

    runs = split_bullets(body)
    if runs:
        for index, run in enumerate(runs, 1):
            title, content = split_title(run)
            items.append(
                _make_item(kind, index, title or f"{_BULLET_LABELS[kind]} {index}", content)
            )
        logger.debug(f"Found {len(items)} {kind.value} item(s) from bullets")
    elif body:
        paragraphs = [p.strip() for p in PARAGRAPH_BREAK.split(body) if p.strip()]
        for index, paragraph in enumerate(paragraphs, 1):
            items.append(
                _make_item(kind, index, f"{_PARAGRAPH_LABELS[kind]} {index}", paragraph)
            )
        logger.info(f"No bullets in {kind.value} section, used {len(items)} paragraph(s)")

    if not items and document_length > PLACEHOLDER_MIN_DOCUMENT_LENGTH:
        logger.warning(f"No {kind.value} items extracted, adding placeholder")
        items.append(placeholder_item(kind))

    return items
