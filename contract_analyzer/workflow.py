"""
LangGraph Workflow for contract analysis.

This module defines a multi-node state machine that orchestrates a single
analysis request:

    check_request -> generate_report -> parse_markdown -> assemble_result

Each node is a pure function of the AnalysisState. A node that fails records
an error message and an HTTP status code, and the graph ends right after it.

Architecture:
    The workflow uses a Protocol-based generator interface, allowing
    easy swapping between the canned sample report (for demos) and the
    Gemini service (for production).

Example:
    >>> from contract_analyzer.workflow import run_analysis
    >>> state = run_analysis(contract_text, "agreement.txt")
    >>> state["result"].to_json_dict()
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, TypedDict

from langgraph.graph import END, StateGraph

from contract_analyzer import validation
from contract_analyzer.exceptions import ContractAnalyzerError, GenerationError
from contract_analyzer.generator import ReportGenerator, create_generator
from contract_analyzer.items import CATEGORY_ERROR
from contract_analyzer.models import AnalysisResult, Clause, ParsedReport, RiskLevel, SectionId
from contract_analyzer.prompts import build_prompt
from contract_analyzer.report import contract_section, empty_sections, parse_report
from contract_analyzer.validation import DocumentPayload

logger = logging.getLogger(__name__)

# =============================================================================
# STATE
# =============================================================================

class AnalysisState(TypedDict, total=False):
    """State passed between workflow nodes."""
    payload: dict[str, Any]
    document: Optional[DocumentPayload]
    markdown: str
    report: Optional[ParsedReport]
    result: Optional[AnalysisResult]
    error: Optional[str]
    status_code: int
    metadata: dict[str, Any]


# Global generator instance (can be swapped for testing)
_generator: ReportGenerator = create_generator()


def _fail(state: AnalysisState, error: ContractAnalyzerError) -> AnalysisState:
    """Record a failure on the state; the graph ends after this node."""
    logger.error(f"❌ {error}")
    return {
        **state,
        "error": error.message,
        "status_code": error.status_code,
    }


# =============================================================================
# WORKFLOW NODES
# =============================================================================

def check_request(state: AnalysisState) -> AnalysisState:
    """
    Validate the request before anything is sent to the AI service.

    Args:
        state: Workflow state containing the raw request payload.

    Returns:
        State with the validated document, or with an error recorded.
    """
    logger.info("🔍 Validating Request")

    metadata: dict[str, Any] = dict(state.get("metadata", {}))

    try:
        document = validation.validate_request(state.get("payload") or {})
    except ContractAnalyzerError as e:
        return _fail(state, e)

    metadata["filename"] = document.filename
    metadata["document_type"] = document.mime_type
    metadata["text_length"] = len(document.text)
    metadata["truncated"] = document.truncated
    logger.info(
        f"Processing document \"{document.filename}\" "
        f"({document.mime_type}, {len(document.text):,} chars)"
    )

    return {**state, "document": document, "metadata": metadata}


def generate_report(state: AnalysisState) -> AnalysisState:
    """
    Ask the configured generator for the markdown analysis report.

    Args:
        state: Workflow state with a validated document.

    Returns:
        State with ``markdown`` populated, or with an error recorded.
    """
    logger.info("🤖 Generating Analysis Report")

    metadata: dict[str, Any] = dict(state.get("metadata", {}))
    document = state["document"]

    try:
        markdown = _generator.generate(build_prompt(document), document)
        validation.validate_response(markdown)
    except ContractAnalyzerError as e:
        return _fail(state, e)
    except Exception as e:
        logger.exception("Unexpected error from report generator")
        return _fail(state, GenerationError(reason=str(e)))

    metadata["generated_at"] = datetime.now().isoformat()
    metadata["response_length"] = len(markdown)

    return {**state, "markdown": markdown, "metadata": metadata}


def parse_markdown(state: AnalysisState) -> AnalysisState:
    """
    Parse the markdown report into sections and scored items.

    Args:
        state: Workflow state with the generated markdown.

    Returns:
        State with ``report`` populated, or with an error recorded when
        nothing meaningful could be extracted.
    """
    logger.info("📑 Extracting Sections")

    metadata: dict[str, Any] = dict(state.get("metadata", {}))
    markdown = state.get("markdown", "")

    report = parse_report(markdown)
    try:
        validation.validate_report(report, markdown)
    except ContractAnalyzerError as e:
        return _fail(state, e)

    metadata["key_clause_count"] = len(report.key_clauses)
    metadata["risk_count"] = len(report.risks)

    high_risks = sum(1 for c in report.key_clauses if c.risk == RiskLevel.HIGH)
    if high_risks:
        logger.warning(f"⚠️  {high_risks} high-risk key clause(s)")

    return {**state, "report": report, "metadata": metadata}


def assemble_result(state: AnalysisState) -> AnalysisState:
    """
    Wrap the parsed report into the final AnalysisResult.

    This is the terminal node in the workflow.
    """
    logger.info("📄 Assembling Result")

    metadata: dict[str, Any] = dict(state.get("metadata", {}))
    document = state["document"]

    result = AnalysisResult.from_report(
        state["report"],
        filename=document.filename,
        markdown_content=state.get("markdown", ""),
    )
    metadata["result_id"] = result.id
    metadata["completed_at"] = datetime.now().isoformat()

    return {**state, "result": result, "status_code": 200, "metadata": metadata}


# =============================================================================
# WORKFLOW DEFINITION
# =============================================================================

def set_generator(generator: ReportGenerator) -> None:
    """
    Set the report generator to use.

    Allows swapping between MockGenerator and GeminiGenerator.

    Args:
        generator: An object implementing the ReportGenerator protocol.
    """
    global _generator
    _generator = generator


def get_generator() -> ReportGenerator:
    """Return the report generator currently in use."""
    return _generator


def _continue_or_end(state: AnalysisState) -> str:
    return "failed" if state.get("error") else "continue"


def create_workflow() -> StateGraph:
    """
    Create and configure the analysis workflow.

    The workflow consists of four nodes:
    1. check_request: Validate the request payload
    2. generate_report: Get the markdown report from the AI service
    3. parse_markdown: Extract sections and scored items
    4. assemble_result: Build the AnalysisResult

    Returns:
        Configured StateGraph ready for compilation.
    """
    wf = StateGraph(AnalysisState)

    # Add nodes
    wf.add_node("check_request", check_request)
    wf.add_node("generate_report", generate_report)
    wf.add_node("parse_markdown", parse_markdown)
    wf.add_node("assemble_result", assemble_result)

    # Define entry point
    wf.set_entry_point("check_request")

    # Each step either continues or ends the run on error
    wf.add_conditional_edges(
        "check_request", _continue_or_end, {"continue": "generate_report", "failed": END}
    )
    wf.add_conditional_edges(
        "generate_report", _continue_or_end, {"continue": "parse_markdown", "failed": END}
    )
    wf.add_conditional_edges(
        "parse_markdown", _continue_or_end, {"continue": "assemble_result", "failed": END}
    )
    wf.add_edge("assemble_result", END)

    return wf


def create_initial_state(text: Any, filename: Any) -> AnalysisState:
    """
    Create a properly initialized state for the workflow.

    Args:
        text: Document text or data URI, as received.
        filename: Document filename, as received.

    Returns:
        Initial AnalysisState ready for workflow invocation.
    """
    return {
        "payload": {"text": text, "filename": filename},
        "document": None,
        "markdown": "",
        "report": None,
        "result": None,
        "error": None,
        "status_code": 0,
        "metadata": {
            "created_at": datetime.now().isoformat(),
        },
    }


def run_analysis(text: Any, filename: Any) -> AnalysisState:
    """
    Run one analysis request through the workflow.

    Returns:
        Final state: ``result`` on success, ``error`` and ``status_code``
        otherwise.
    """
    return app.invoke(create_initial_state(text, filename))


def build_fallback_result(filename: str, message: str) -> AnalysisResult:
    """
    Build a renderable result for an analysis that failed.

    Used by clients that must always show something, e.g. the CLI.
    """
    message = message or "Unknown error"
    sections = empty_sections()
    sections["suggestions"] = contract_section(
        SectionId.SUGGESTIONS,
        "Try uploading a different document or converting to a different "
        "format (e.g., PDF or plain text).",
    )
    return AnalysisResult(
        filename=filename,
        executive_summary=f"Error analyzing document: {message}",
        key_clauses=[
            Clause(
                id="1",
                title="Analysis Error",
                content=(
                    f"There was an error analyzing this document: {message}. "
                    "Please try again or use a different document."
                ),
                category=CATEGORY_ERROR,
                risk=RiskLevel.HIGH,
            )
        ],
        risks=[
            Clause(
                id="risk-1",
                title="Analysis Failed",
                content=(
                    "The document analysis failed. This could be due to document "
                    "format issues or system limitations."
                ),
                category=CATEGORY_ERROR,
                risk=RiskLevel.HIGH,
            )
        ],
        markdown_content=(
            f"# Analysis Error\n\nThere was an error analyzing this document: {message}. "
            "Please try again or use a different document."
        ),
        **sections,
    )


# Create and compile the workflow
workflow = create_workflow()
app = workflow.compile()


__all__ = [
    "AnalysisState",
    "build_fallback_result",
    "check_request",
    "generate_report",
    "parse_markdown",
    "assemble_result",
    "create_workflow",
    "create_initial_state",
    "get_generator",
    "run_analysis",
    "set_generator",
    "app",
    "workflow",
]
