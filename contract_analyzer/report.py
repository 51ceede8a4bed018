"""
Markdown report parsing.

``parse_report`` is the single entry point of the parsing core: it extracts
the ten sections, segments the key clauses and risks into scored items, and
maps the prose sections to ``ContractSection`` records. It never raises; any
unexpected failure degrades to ``default_report``.
"""

from __future__ import annotations

import logging

from contract_analyzer.items import CATEGORY_ERROR, segment_items
from contract_analyzer.models import (
    Clause,
    ContractSection,
    ExtractedSections,
    ItemKind,
    ParsedReport,
    RiskLevel,
    SectionId,
)
from contract_analyzer.sections import extract_sections, get_section_pattern, normalize_markdown

logger = logging.getLogger(__name__)

PARSE_ERROR_SUMMARY = "Error parsing the analysis."

# Prose sections and the ids the UI has always used for them
CONTRACT_SECTION_IDS: dict[SectionId, str] = {
    SectionId.PARTIES: "parties",
    SectionId.OBLIGATIONS: "obligations",
    SectionId.RIGHTS: "rights",
    SectionId.PAYMENT_TERMS: "payment",
    SectionId.TERMINATION: "termination",
    SectionId.DATES: "dates",
    SectionId.SUGGESTIONS: "suggestions",
}


def contract_section(section_id: SectionId, content: str = "") -> ContractSection:
    """Build the ``ContractSection`` record for a prose section."""
    return ContractSection(
        id=CONTRACT_SECTION_IDS[section_id],
        title=get_section_pattern(section_id).title,
        content=content,
    )


def _prose_sections(sections: ExtractedSections) -> dict[str, ContractSection]:
    return {
        section_id.field_name: contract_section(section_id, sections[section_id].body)
        for section_id in CONTRACT_SECTION_IDS
    }


def empty_sections() -> dict[str, ContractSection]:
    """All seven prose sections with empty content."""
    return {
        section_id.field_name: contract_section(section_id)
        for section_id in CONTRACT_SECTION_IDS
    }


def default_report(reason: str) -> ParsedReport:
    """
    Build the structurally complete report used when parsing fails.

    Args:
        reason: What went wrong; logged for debugging, not shown to users.

    Returns:
        ParsedReport with an error summary and one error item per list.
    """
    logger.error(f"Falling back to default report: {reason}")
    return ParsedReport(
        executive_summary=PARSE_ERROR_SUMMARY,
        key_clauses=[
            Clause(
                id="1",
                title="Error in Analysis",
                content=(
                    "There was an error processing the document. "
                    "Please try again with a different document."
                ),
                category=CATEGORY_ERROR,
                risk=RiskLevel.HIGH,
            )
        ],
        risks=[
            Clause(
                id="risk-1",
                title="Analysis Error",
                content="There was an error analyzing risks in this document.",
                category=CATEGORY_ERROR,
                risk=RiskLevel.HIGH,
            )
        ],
        **empty_sections(),
    )


def parse_report(markdown_text: str) -> ParsedReport:
    """
    Parse a generated markdown report into structured content.

    Args:
        markdown_text: The complete report returned by the AI service.

    Returns:
        ParsedReport; ``default_report`` output if parsing failed.
    """
    try:
        text = normalize_markdown(markdown_text)
        sections = extract_sections(text)

        key_clauses = segment_items(
            sections.key_clauses.body, ItemKind.CLAUSE, document_length=len(text)
        )
        risks = segment_items(
            sections.risks.body, ItemKind.RISK, document_length=len(text)
        )

        logger.info(
            f"Parsed report: {len(sections.found)} sections, "
            f"{len(key_clauses)} key clauses, {len(risks)} risks"
        )

        return ParsedReport(
            executive_summary=sections.executive_summary.body,
            key_clauses=key_clauses,
            risks=risks,
            **_prose_sections(sections),
        )

    except Exception as e:
        return default_report(f"{type(e).__name__}: {e}")
