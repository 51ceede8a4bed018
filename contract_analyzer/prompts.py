"""Prompt templates for the contract analysis report."""

from __future__ import annotations

from contract_analyzer.validation import DocumentPayload

# The ten headings here are what contract_analyzer.sections looks for
REPORT_SECTIONS = """
Your analysis should be well-structured in markdown format with the following sections:

# Contract Analysis

## 1. Executive Summary
Provide a concise summary of the contract including type, parties, purpose, and key terms.

## 2. Key Clauses
List and analyze the most important clauses in bullet points. Include:
- What the clause covers
- Any notable provisions, limitations, or exceptions
- For each key clause, include 2-3 sub-bullet points with analysis

## 3. Parties Involved
List all parties to the contract with relevant details about each.

## 4. Obligations
Detail the main obligations of each party in the contract.

## 5. Rights and Benefits
Outline the rights and benefits granted to each party.

## 6. Payment Terms
Describe all payment terms including amounts, schedules, and conditions.

## 7. Termination Conditions
Explain how the contract can be terminated and any consequences of termination.

## 8. Risks & Red Flags
Identify potential issues or concerns in bullet points that might:
- Create legal liability
- Benefit one party significantly more than others
- Contain vague or ambiguous language
- Have missing elements that are typically included

## 9. Important Dates & Durations
List key dates, deadlines, and time periods in the contract.

## 10. Suggestions
Provide recommendations to improve the contract or address the identified risks.
"""

TEXT_PROMPT_TEMPLATE = """
You are a legal document analyzer. Analyze the following contract and provide a detailed report.
{sections}
Here is the contract to analyze:

{document_text}
"""

BINARY_PROMPT_TEMPLATE = """
You are a legal document analyzer. Analyze the following contract image or PDF and provide a detailed report.
{docx_note}{sections}
If there are parts of the document that you cannot read or interpret, please note this clearly in your analysis.
"""

DOCX_NOTE = (
    "NOTE: This is a DOCX file being sent with a PDF MIME type for compatibility. "
    "Please analyze the content as a DOCX file.\n"
)


def build_prompt(document: DocumentPayload) -> str:
    """
    Build the analysis prompt for a validated document.

    Plain text is embedded in the prompt; binary payloads are sent alongside
    it as inline data, so their prompt only describes the expected report.
    """
    if document.is_binary:
        return BINARY_PROMPT_TEMPLATE.format(
            docx_note=DOCX_NOTE if document.is_docx else "",
            sections=REPORT_SECTIONS,
        )
    return TEXT_PROMPT_TEMPLATE.format(
        sections=REPORT_SECTIONS,
        document_text=document.text,
    )
