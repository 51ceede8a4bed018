"""
Section extraction for generated contract reports.

The analysis prompt asks the model for ten numbered level-2 headings, but the
headings that come back vary: numbering may be missing, "&" and "and" are used
interchangeably, capitalization and heading level drift, and headings are
sometimes wrapped in bold markers. Each section therefore gets its own tolerant
heading matcher, and its body runs until the next line that could start a
section: a heading, at any level, that matches one of the ten matchers or
carries a section number.

Example:
    >>> sections = extract_sections(markdown)
    >>> sections.payment_terms.body
    '- Rate: $200 per hour'
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional, Sequence

from contract_analyzer.models import ExtractedSections, Section, SectionId

logger = logging.getLogger(__name__)

# "&" and "and" are interchangeable in every heading name
_AND = r"[ \t]*(?:&|and)[ \t]*"

# Heading marker, optional bold, optional "3." / "3)" numbering
_HEADING_PREFIX = (
    r"^[ \t]*\#{1,6}(?!\#)[ \t]*"
    r"(?:\*\*|__)?[ \t]*"
    r"(?:(?P<number>\d+)[.)]?[ \t]*)?"
    r"(?:\*\*|__)?[ \t]*"
)


@dataclass(frozen=True)
class SectionPattern:
    """
    Tolerant matcher for one report section.

    Attributes:
        identifier: The section this pattern locates.
        title: Canonical human-readable title.
        heading: Compiled pattern matching the whole heading line.
    """

    identifier: SectionId
    title: str
    heading: re.Pattern

    def locate(self, text: str) -> Optional[re.Match]:
        """
        Find this section's heading line.

        When several headings match (e.g. a "### Risk Allocation" sub-heading
        before the real "## 8. Risks & Red Flags"), the earliest numbered one
        wins, else the earliest.
        """
        matches = list(self.heading.finditer(text))
        if not matches:
            return None
        return next((m for m in matches if m.group("number")), matches[0])

    def find_body(self, text: str, boundaries: Optional[Sequence[int]] = None) -> str:
        """
        Return the trimmed body under this section's heading, or "".

        Args:
            text: Normalized report text.
            boundaries: Sorted ``section_boundaries(text)``; computed when omitted.
        """
        match = self.locate(text)
        if match is None:
            return ""

        if boundaries is None:
            boundaries = section_boundaries(text)
        index = bisect_right(boundaries, match.start())
        end = boundaries[index] if index < len(boundaries) else len(text)
        return text[match.end():end].strip()


def _heading(name: str) -> re.Pattern:
    return re.compile(
        _HEADING_PREFIX + rf"(?:{name})(?![A-Za-z])[^\n]*$",
        re.IGNORECASE | re.MULTILINE,
    )


# "## 3. Anything" starts a section even when the name is not recognized
_NUMBERED_HEADING = re.compile(
    r"^[ \t]*\#{1,6}(?!\#)[ \t]*(?:\*\*|__)?[ \t]*\d+[.)]",
    re.MULTILINE,
)


# Ordered as the prompt requests them
SECTION_PATTERNS: tuple[SectionPattern, ...] = (
    SectionPattern(
        SectionId.EXECUTIVE_SUMMARY,
        "Executive Summary",
        _heading(r"Executive[ \t]*Summary"),
    ),
    SectionPattern(
        SectionId.KEY_CLAUSES,
        "Key Clauses",
        _heading(r"Key[ \t]*Clauses?"),
    ),
    SectionPattern(
        SectionId.PARTIES,
        "Parties Involved",
        _heading(r"Parties(?:[ \t]*Involved)?"),
    ),
    SectionPattern(
        SectionId.OBLIGATIONS,
        "Obligations",
        _heading(r"(?:Key[ \t]*)?Obligations"),
    ),
    SectionPattern(
        SectionId.RIGHTS,
        "Rights and Benefits",
        _heading(rf"Rights(?:{_AND}Benefits)?"),
    ),
    SectionPattern(
        SectionId.PAYMENT_TERMS,
        "Payment Terms",
        _heading(r"Payment[ \t]*Terms"),
    ),
    SectionPattern(
        SectionId.TERMINATION,
        "Termination Conditions",
        _heading(r"Termination(?:[ \t]*Conditions)?"),
    ),
    SectionPattern(
        SectionId.RISKS,
        "Risks & Red Flags",
        _heading(rf"Risks?(?:{_AND}Red[ \t]*Flags)?"),
    ),
    SectionPattern(
        SectionId.DATES,
        "Important Dates & Durations",
        _heading(rf"(?:Important[ \t]*)?Dates(?:{_AND}Durations?)?"),
    ),
    SectionPattern(
        SectionId.SUGGESTIONS,
        "Suggestions",
        _heading(r"Suggestions|Recommendations"),
    ),
)


def get_section_pattern(section_id: SectionId) -> Optional[SectionPattern]:
    """Look up the pattern registered for a section identifier."""
    for pattern in SECTION_PATTERNS:
        if pattern.identifier == section_id:
            return pattern
    return None


def section_boundaries(text: str) -> list[int]:
    """
    Sorted start offsets of every heading line that can begin a section.

    A body always ends at the next of these, whatever its heading level, so
    one section never swallows the next when the model promotes or demotes
    a heading.
    """
    starts = {m.start() for m in _NUMBERED_HEADING.finditer(text)}
    for pattern in SECTION_PATTERNS:
        starts.update(m.start() for m in pattern.heading.finditer(text))
    return sorted(starts)


def normalize_markdown(text: str) -> str:
    """Normalize line endings to LF and trim surrounding whitespace."""
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()


def extract_sections(markdown_text: str) -> ExtractedSections:
    """
    Split a markdown report into its ten named sections.

    Extraction is total: every section is present in the result, with an
    empty body when its heading could not be found.

    Args:
        markdown_text: The full markdown report.

    Returns:
        ExtractedSections with one trimmed body per section.
    """
    text = normalize_markdown(markdown_text)
    boundaries = section_boundaries(text)

    sections = {
        pattern.identifier.field_name: Section(
            identifier=pattern.identifier,
            title=pattern.title,
            body=pattern.find_body(text, boundaries),
        )
        for pattern in SECTION_PATTERNS
    }
    result = ExtractedSections(**sections)

    found = result.found
    logger.debug(f"Sections found: {len(found)}/{len(SECTION_PATTERNS)} {found}")
    missing = [p.identifier.value for p in SECTION_PATTERNS if p.identifier.value not in found]
    if missing and text:
        logger.info(f"Sections missing from report: {', '.join(missing)}")

    return result
