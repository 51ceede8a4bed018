#!/usr/bin/env python3
"""
Contract Analyzer - Demo Runner

This script demonstrates the full analysis pipeline:
1. Load a contract from a text file
2. Run the LangGraph workflow (Gemini, or the sample report with --mock)
3. Print the executive summary, key clauses, risks and risk metrics
4. Optionally write the JSON analysis record

Usage:
    python run_demo.py                         # Analyze the sample contract
    python run_demo.py --file contract.txt     # Analyze a custom contract
    python run_demo.py --mock                  # Use the canned sample report
    python run_demo.py -o analysis.json        # Save the JSON record
    python run_demo.py --verbose               # Enable debug logging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

from config.settings import Settings, settings as default_settings

# ASCII art banner
BANNER = """
╔═════════════════════════════════════════════════════════╗
║   📊 Contract Analyzer                                  ║
║   Risk-annotated contract reports                       ║
╚═════════════════════════════════════════════════════════╝
"""

RISK_MARKERS = {
    "high": "🔴",
    "medium": "🟡",
    "low": "🟢",
    "none": "⚪",
}

logger = logging.getLogger(__name__)


def resolve_log_level(verbose: bool = False, config: Optional[Settings] = None) -> int:
    """--verbose forces DEBUG; otherwise LOG_LEVEL from settings applies."""
    if verbose:
        return logging.DEBUG
    return logging.getLevelName((config or default_settings).LOG_LEVEL)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = resolve_log_level(verbose)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Contract Analyzer - Analyze contracts for key clauses and risks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_demo.py                     Run with sample contract
  python run_demo.py -f my_contract.txt  Analyze custom contract
  python run_demo.py --mock -o out.json  Offline run, save the JSON record
        """
    )
    parser.add_argument(
        "-f", "--file",
        type=Path,
        default=Path("data/sample_contract.txt"),
        help="Path to contract file (default: data/sample_contract.txt)"
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the JSON analysis record to this path"
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the canned sample report instead of calling Gemini"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )
    return parser.parse_args()


def load_contract(file_path: Path) -> str:
    """
    Load contract text from file.

    Args:
        file_path: Path to the contract file.

    Returns:
        Contract text content.

    Raises:
        SystemExit: If file cannot be read.
    """
    try:
        content = file_path.read_text(encoding="utf-8")
        logger.info(f"✅ Loaded contract: {file_path} ({len(content):,} characters)")
        return content
    except FileNotFoundError:
        logger.error(f"❌ File not found: {file_path}")
        sys.exit(1)
    except PermissionError:
        logger.error(f"❌ Permission denied: {file_path}")
        sys.exit(1)


def run_workflow(contract_text: str, filename: str):
    """
    Execute the analysis workflow.

    Args:
        contract_text: Raw contract text to analyze.
        filename: Name recorded on the result.

    Returns:
        AnalysisResult; a fallback result if the analysis failed.
    """
    from contract_analyzer.workflow import build_fallback_result, run_analysis

    logger.info("🚀 Starting LangGraph Workflow...")

    state = run_analysis(contract_text, filename)

    if state.get("error"):
        logger.warning(f"⚠️  Analysis failed ({state.get('status_code')}): {state['error']}")
        return build_fallback_result(filename, state["error"])

    return state["result"]


def render_result(result) -> str:
    """Format an AnalysisResult as a plain-text report."""
    breakdown = result.risk_breakdown
    lines = [
        f"📄 {result.filename}  ({result.timestamp:%b %d, %Y %H:%M} UTC)",
        "",
        "Executive Summary",
        "-----------------",
        result.executive_summary or "No information available.",
        "",
        f"Key Clauses ({result.total_clauses})",
        "-----------",
    ]
    for clause in result.key_clauses:
        lines.append(f"{RISK_MARKERS.get(clause.risk, '⚪')} {clause.title}: {clause.content.splitlines()[0]}")

    lines += ["", f"Risks ({len(result.risks)})", "-----"]
    for risk in result.risks:
        lines.append(f"{RISK_MARKERS.get(risk.risk, '⚪')} {risk.content.splitlines()[0]}")

    lines += [
        "",
        "Risk Breakdown: "
        f"high {breakdown.high} | medium {breakdown.medium} | "
        f"low {breakdown.low} | none {breakdown.none}",
    ]
    return "\n".join(lines)


def print_report(report: str) -> None:
    """Print the report with formatting."""
    print("\n" + "═" * 60)
    print(report)
    print("═" * 60 + "\n")


def main() -> NoReturn | None:
    """
    Main entry point for the demo script.

    Orchestrates the full demo pipeline:
    1. Parse CLI arguments
    2. Load contract text
    3. Run analysis workflow
    4. Display report and optionally save JSON
    """
    args = parse_args()
    setup_logging(args.verbose)

    print(BANNER)

    if args.mock:
        from contract_analyzer.generator import MockGenerator
        from contract_analyzer.workflow import set_generator

        logger.info("⏭️  Using sample report instead of Gemini")
        set_generator(MockGenerator())

    # Step 1: Load contract
    contract_text = load_contract(args.file)

    # Step 2: Run workflow
    result = run_workflow(contract_text, args.file.name)

    # Step 3: Display report
    print_report(render_result(result))

    # Step 4: Save JSON record
    if args.output:
        args.output.write_text(
            json.dumps(result.to_json_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info(f"💾 Saved analysis to {args.output}")

    logger.info("✅ Demo completed successfully!")
    return None


if __name__ == "__main__":
    main()
