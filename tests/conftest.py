"""
Pytest fixtures shared across all test modules.
"""

import pytest


@pytest.fixture
def sample_report() -> str:
    """A well-formed report with all ten numbered sections."""
    return """# Contract Analysis

## 1. Executive Summary
A one-year consulting agreement between Acme Corp and Jane Doe.

## 2. Key Clauses
- Termination: Either party may terminate with 30 days notice.
  - No cure period is defined
- Payment Schedule: Invoices are due within 30 days.
- Scope of Work: Consulting services as described in Exhibit A.

## 3. Parties Involved
- Acme Corp: The client
- Jane Doe: The consultant

## 4. Obligations
The consultant performs the services; the client pays invoices.

## 5. Rights and Benefits
The client owns all deliverables.

## 6. Payment Terms
- Rate: $150 per hour

## 7. Termination Conditions
30 days written notice by either party.

## 8. Risks & Red Flags
- No definition of material breach
- Unlimited confidentiality period

## 9. Important Dates & Durations
- Effective Date: January 1, 2024

## 10. Suggestions
- Define material breach
"""


@pytest.fixture
def messy_report() -> str:
    """A report with inconsistent headings, line endings and bullets."""
    return (
        "#Contract Analysis\r\n\r\n"
        "##executive summary\r\n"
        "Short services agreement.\r\n\r\n"
        "## KEY CLAUSE\r\n"
        "* **Indemnification:** Vendor indemnifies the customer.\r\n"
        "• Renewal: Renews yearly unless cancelled.\r\n\r\n"
        "## 8) Risks and Red Flags\r\n"
        "1. Auto-renewal may lock the customer in.\r\n"
        "2. No liability cap.\r\n\r\n"
        "## **9. Important Dates and Durations**\r\n"
        "- Term: 12 months\r\n"
    )


@pytest.fixture
def sample_contract_text() -> str:
    """Plain contract text long enough to pass validation."""
    return """
    CONSULTING AGREEMENT

    1. SERVICES
    The Consultant shall provide strategic consulting services to the Company.

    2. TERM
    This Agreement continues for 12 months unless terminated earlier.

    3. TERMINATION
    Either party may terminate with 30 days written notice.
    """


@pytest.fixture
def mock_generator():
    """Install a MockGenerator for the duration of a test."""
    from contract_analyzer.generator import MockGenerator
    from contract_analyzer.workflow import get_generator, set_generator

    previous = get_generator()
    generator = MockGenerator()
    set_generator(generator)
    yield generator
    set_generator(previous)
