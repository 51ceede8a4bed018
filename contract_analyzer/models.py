"""
Domain models for the Contract Analyzer.

This module defines Pydantic models for the structured analysis record.
Attribute names are snake_case; serialized names are camelCase so that the
JSON produced by ``model_dump(by_alias=True)`` matches the schema already
stored by existing clients (``executiveSummary``, ``keyClauses``, ...).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RiskLevel(str, Enum):
    """Enumeration of clause risk tiers."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class SectionId(str, Enum):
    """The ten sections a generated report is expected to contain."""

    EXECUTIVE_SUMMARY = "executive-summary"
    KEY_CLAUSES = "key-clauses"
    PARTIES = "parties"
    OBLIGATIONS = "obligations"
    RIGHTS = "rights"
    PAYMENT_TERMS = "payment-terms"
    TERMINATION = "termination"
    RISKS = "risks"
    DATES = "dates"
    SUGGESTIONS = "suggestions"

    @property
    def field_name(self) -> str:
        """Attribute name of this section on ``ExtractedSections``."""
        return self.value.replace("-", "_")


class ItemKind(str, Enum):
    """Which list-bearing section a segmentation call targets."""

    CLAUSE = "clause"
    RISK = "risk"


class _WireModel(BaseModel):
    """Base for models serialized with camelCase names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        frozen=True,
    )


class Section(_WireModel):
    """
    A named region of the generated report.

    Attributes:
        identifier: Which of the ten known sections this is.
        title: Human-readable label.
        body: Trimmed section text, empty string when the section is missing.
    """

    identifier: SectionId
    title: str
    body: str = ""


class ExtractedSections(_WireModel):
    """
    Result of section extraction: exactly one ``Section`` per identifier.

    Supports ``sections[SectionId.RISKS]`` lookups alongside attribute access.
    Plain identifier strings such as ``"risks"`` work as keys too.
    """

    executive_summary: Section
    key_clauses: Section
    parties: Section
    obligations: Section
    rights: Section
    payment_terms: Section
    termination: Section
    risks: Section
    dates: Section
    suggestions: Section

    def __getitem__(self, section_id: Union[SectionId, str]) -> Section:
        return getattr(self, SectionId(section_id).field_name)

    def in_order(self) -> list[Section]:
        """All ten sections in report order."""
        return [self[section_id] for section_id in SectionId]

    @property
    def found(self) -> list[str]:
        """Identifiers of the sections that have a non-empty body."""
        return [section.identifier for section in self.in_order() if section.body]


class Clause(_WireModel):
    """
    A discrete clause or risk finding.

    Attributes:
        id: Identifier unique within its list ("1", "2", ... or "risk-1", ...).
        title: Short label taken from the text before a colon, or synthesized.
        content: Descriptive text; never empty.
        category: "Key Clause", "Risk", "General" or "Error".
        risk: Risk tier.
    """

    id: str = Field(..., description="Identifier unique within its list")
    title: str = Field(..., description="Short label")
    content: str = Field(..., min_length=1, description="Descriptive text")
    category: str = Field(..., description="Item category tag")
    risk: RiskLevel = Field(RiskLevel.NONE, description="Risk tier")


class ContractSection(_WireModel):
    """A prose section of the analysis rendered as-is by the UI."""

    id: str
    title: str
    content: str = ""


class RiskCounts(_WireModel):
    """Number of items per risk tier."""

    high: int = 0
    medium: int = 0
    low: int = 0
    none: int = 0

    @classmethod
    def tally(cls, items: Iterable[Clause]) -> "RiskCounts":
        """Count items by their risk tier."""
        counts = {level.value: 0 for level in RiskLevel}
        for item in items:
            counts[RiskLevel(item.risk).value] += 1
        return cls(**counts)

    @property
    def total(self) -> int:
        return self.high + self.medium + self.low + self.none


class ParsedReport(_WireModel):
    """
    Structured content parsed from one markdown report.

    This is the output of the parsing core; the caller wraps it into an
    ``AnalysisResult`` together with the request metadata.
    """

    executive_summary: str = ""
    key_clauses: list[Clause] = Field(default_factory=list)
    parties: ContractSection
    obligations: ContractSection
    rights: ContractSection
    payment_terms: ContractSection
    termination: ContractSection
    risks: list[Clause] = Field(default_factory=list)
    dates: ContractSection
    suggestions: ContractSection

    @property
    def has_content(self) -> bool:
        """False when nothing meaningful was parsed from the report."""
        return bool(self.executive_summary) or bool(self.key_clauses) or bool(self.risks)


def _new_result_id() -> str:
    return uuid4().hex[:9]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisResult(_WireModel):
    """
    Complete analysis record returned to clients.

    Attributes:
        id: Random identifier assigned by the caller.
        filename: Name of the analyzed document.
        timestamp: When the analysis was produced (UTC).
        executive_summary: Summary paragraph(s) of the report.
        key_clauses: Risk-scored key clauses.
        risks: Flagged risks.
        markdown_content: The full markdown report for rendering.
    """

    id: str = Field(default_factory=_new_result_id)
    filename: str
    timestamp: datetime = Field(default_factory=_utcnow)
    executive_summary: str = ""
    key_clauses: list[Clause] = Field(default_factory=list)
    parties: ContractSection
    obligations: ContractSection
    rights: ContractSection
    payment_terms: ContractSection
    termination: ContractSection
    risks: list[Clause] = Field(default_factory=list)
    dates: ContractSection
    suggestions: ContractSection
    markdown_content: str = ""

    @classmethod
    def from_report(
        cls, report: ParsedReport, filename: str, markdown_content: str
    ) -> "AnalysisResult":
        """Assemble a result from a parsed report and request metadata."""
        return cls(
            filename=filename,
            markdown_content=markdown_content,
            **{name: getattr(report, name) for name in ParsedReport.model_fields},
        )

    @property
    def total_clauses(self) -> int:
        """Number of key clauses extracted."""
        return len(self.key_clauses)

    @property
    def risk_breakdown(self) -> RiskCounts:
        """Risk tier counts across key clauses and risks."""
        return RiskCounts.tally([*self.key_clauses, *self.risks])

    def to_json_dict(self) -> dict:
        """Serialize with the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True)
