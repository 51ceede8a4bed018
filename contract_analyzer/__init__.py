"""
Contract Analyzer - Core Module

Turns AI-generated contract analysis reports into structured,
risk-annotated records.

This package provides:
    - Sections: tolerant extraction of the ten report sections
    - Items: bullet segmentation of key clauses and risks
    - Risk: keyword-based risk tier classification
    - Workflow: LangGraph pipeline from request to AnalysisResult
    - Models: Pydantic domain models for type-safe operations
    - Exceptions: Custom exception hierarchy for error handling

Example:
    >>> from contract_analyzer import parse_report
    >>>
    >>> report = parse_report(markdown)
    >>> [c.title for c in report.key_clauses]
    ['Limitation of Liability', 'Termination', ...]
"""

from contract_analyzer.sections import extract_sections, normalize_markdown
from contract_analyzer.items import segment_items
from contract_analyzer.risk import classify_risk, count_by_risk, filter_by_risk
from contract_analyzer.report import default_report, parse_report
from contract_analyzer.models import (
    AnalysisResult,
    Clause,
    ContractSection,
    ExtractedSections,
    ItemKind,
    ParsedReport,
    RiskCounts,
    RiskLevel,
    Section,
    SectionId,
)
from contract_analyzer.exceptions import (
    ContractAnalyzerError,
    ExtractionError,
    GenerationError,
    IncompleteResponseError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Parsing core
    "extract_sections",
    "normalize_markdown",
    "segment_items",
    "classify_risk",
    "count_by_risk",
    "filter_by_risk",
    "parse_report",
    "default_report",
    # Models
    "AnalysisResult",
    "Clause",
    "ContractSection",
    "ExtractedSections",
    "ItemKind",
    "ParsedReport",
    "RiskCounts",
    "RiskLevel",
    "Section",
    "SectionId",
    # Exceptions
    "ContractAnalyzerError",
    "ExtractionError",
    "GenerationError",
    "IncompleteResponseError",
    "ValidationError",
]
