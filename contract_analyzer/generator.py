"""
Report generators: the generative AI service behind the analysis.

The workflow talks to a ``ReportGenerator``; ``GeminiGenerator`` calls the
Gemini REST API and ``MockGenerator`` returns a canned report so the pipeline
can run without network access.

Service failures are mapped to ``GenerationError`` instances carrying the
user-facing message and HTTP status code for each failure kind.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional, Protocol, runtime_checkable

import requests

from config.settings import Settings, settings as default_settings
from contract_analyzer.exceptions import GenerationError
from contract_analyzer.validation import DocumentPayload

logger = logging.getLogger(__name__)

SAFETY_SETTINGS: list[dict[str, str]] = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]

API_KEY_MISSING_MESSAGE = (
    "Google AI API key not configured. "
    "Please set the GOOGLE_AI_API_KEY environment variable."
)
TIMEOUT_MESSAGE = "Analysis request timed out. Please try again with a shorter document."

# (marker in the service error, status code, message), checked in order
SERVICE_ERRORS: tuple[tuple[str, int, str], ...] = (
    ("RESOURCE_EXHAUSTED", 429, "AI service quota exceeded. Please try again later."),
    ("INVALID_ARGUMENT", 400, "Invalid input provided to AI service."),
    ("PERMISSION_DENIED", 403, "Permission denied by AI service. Check API key configuration."),
    ("FAILED_PRECONDITION", 412, "Precondition failed for AI service request."),
)

DOCX_UNSUPPORTED_MESSAGE = (
    "DOCX file format could not be processed. Try converting to PDF and uploading again."
)


def map_service_error(error_text: str, document: Optional[DocumentPayload] = None) -> GenerationError:
    """
    Translate a service error description into a ``GenerationError``.

    Args:
        error_text: Error status and message reported by the service.
        document: The document being analyzed, for format-specific messages.
    """
    for marker, status_code, message in SERVICE_ERRORS:
        if marker in error_text:
            return GenerationError(message, status_code=status_code, reason=error_text)

    if (
        document is not None
        and document.is_docx
        and "mimeType" in error_text
        and "not supported" in error_text
    ):
        return GenerationError(DOCX_UNSUPPORTED_MESSAGE, status_code=400, reason=error_text)

    return GenerationError(reason=error_text)


@runtime_checkable
class ReportGenerator(Protocol):
    """
    Protocol for report generation implementations.

    Allows swapping between the canned mock report and the Gemini service.
    """

    def generate(self, prompt: str, document: DocumentPayload) -> str:
        """
        Produce a markdown analysis report.

        Returns:
            The complete markdown text.
        """
        ...


SAMPLE_REPORT = """
# Contract Analysis

## 1. Executive Summary
This is a Consulting Agreement between Northwind Holdings, Inc. and Blue Harbor Advisory, LLC dated March 1, 2024. The agreement sets up a one-year consulting engagement covering strategic business consulting and market analysis at $180 per hour, capped at $9,000 per month.

## 2. Key Clauses
- Limitation of Liability: Neither party is liable for indirect, incidental, or consequential damages.
  - The limitation is mutual
  - No cap on direct damages is specified

- Termination: Either party may terminate with 30 days' notice; the Company may terminate immediately for material breach.
  - No cure period for material breach
  - Immediate termination is only available to the Company

- Confidentiality: The Consultant must keep Company information confidential.
  - No time limit on the obligation
  - No stated remedies for disclosure

- Intellectual Property: All deliverables created by the Consultant belong to the Company.
  - Full assignment of rights
  - No carve-out for pre-existing materials

- Invoicing: The Consultant invoices monthly and the Company pays within 30 days.

## 3. Parties Involved
- Northwind Holdings, Inc.: A Delaware corporation ("Company")
- Blue Harbor Advisory, LLC: A California limited liability company ("Consultant")

## 4. Obligations
- Consultant's Obligations:
  - Provide the services described in Exhibit A
  - Maintain confidentiality
  - Invoice the Company monthly
- Company's Obligations:
  - Pay invoices within 30 days

## 5. Rights and Benefits
- Company owns all deliverables
- Either party may terminate on 30 days' notice

## 6. Payment Terms
- Rate: $180 per hour
- Monthly cap: $9,000 without prior approval
- Payment due: Within 30 days of invoice

## 7. Termination Conditions
- Either party may terminate with 30 days' written notice
- Company may terminate immediately for material breach

## 8. Risks & Red Flags
- No definition of "material breach" for immediate termination
- No cure period for breaches
- No specific confidentiality period (potentially perpetual)
- No dispute resolution process

## 9. Important Dates & Durations
- Effective Date: March 1, 2024
- Term: One year
- Termination Notice: 30 days

## 10. Suggestions
- Define "material breach" with specific examples
- Add a 15-day cure period for breaches
- Limit the confidentiality period to 3 years
- Add a dispute resolution process
"""


class MockGenerator:
    """
    Canned generator for demos and tests.

    Returns the same sample report for every document.
    """

    def __init__(self, report: str = SAMPLE_REPORT) -> None:
        self.report = report

    def generate(self, prompt: str, document: DocumentPayload) -> str:
        logger.info(f"Using sample report for {document.filename}")
        return self.report


def extract_response_text(data: dict[str, Any]) -> str:
    """Join the text parts of the first candidate in a Gemini response."""
    candidates = data.get("candidates") or []
    if not candidates:
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            logger.warning(f"Gemini blocked the prompt: {block_reason}")
        return ""

    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts)


def _error_text(response: requests.Response) -> str:
    try:
        error = response.json().get("error", {})
        return f"{error.get('status', '')}: {error.get('message', '')}".strip(": ")
    except (ValueError, AttributeError):
        return f"{response.status_code} {response.reason}"


class GeminiGenerator:
    """
    Report generator backed by the Gemini ``generateContent`` REST endpoint.

    Args:
        api_key: Gemini API key (defaults to settings).
        model_name: Model to call (defaults to settings).
        base_url: REST API base URL (defaults to settings).
        timeout: Request timeout in seconds (defaults to settings).
        session: Optional requests session, mainly for tests.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = default_settings.GOOGLE_AI_API_KEY if api_key is None else api_key
        self.model_name = model_name or default_settings.MODEL_NAME
        self.base_url = (base_url or default_settings.GEMINI_API_URL).rstrip("/")
        self.timeout = timeout or default_settings.REQUEST_TIMEOUT
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model_name}:generateContent"

    def build_payload(self, prompt: str, document: DocumentPayload) -> dict[str, Any]:
        """Build the request body: the prompt plus inline data for binary files."""
        parts: list[dict[str, Any]] = [{"text": prompt}]
        if document.is_binary:
            parts.append({"inlineData": {"mimeType": document.mime_type, "data": document.data}})
        return {
            "contents": [{"role": "user", "parts": parts}],
            "safetySettings": SAFETY_SETTINGS,
        }

    def generate(self, prompt: str, document: DocumentPayload) -> str:
        """
        Call Gemini and return the markdown report.

        Raises:
            GenerationError: On missing configuration, timeouts, transport
                failures or error responses from the service.
        """
        if not self.api_key.strip():
            logger.error("Google AI API key not configured")
            raise GenerationError(API_KEY_MISSING_MESSAGE, status_code=500)

        logger.info(f"Calling Gemini model {self.model_name}")
        start = time.monotonic()

        try:
            response = self._session.post(
                self.endpoint,
                headers={"x-goog-api-key": self.api_key},
                json=self.build_payload(prompt, document),
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            logger.error(f"Gemini request timed out after {self.timeout}s")
            raise GenerationError(TIMEOUT_MESSAGE, status_code=504, reason=str(e)) from e
        except requests.RequestException as e:
            logger.error(f"Gemini request failed: {e}")
            raise GenerationError(reason=str(e)) from e

        if not response.ok:
            error_text = _error_text(response)
            logger.error(f"Error calling Gemini API: {error_text}")
            raise map_service_error(error_text, document)

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError(reason=f"Invalid JSON from Gemini: {e}") from e

        text = extract_response_text(data)
        logger.info(f"Gemini model response received in {time.monotonic() - start:.2f} seconds")
        logger.debug(f"Gemini response preview: {text[:500]}")
        return text


def create_generator(config: Optional[Settings] = None) -> ReportGenerator:
    """Build the generator selected by configuration."""
    config = config or default_settings
    if config.USE_MOCK_GENERATOR:
        return MockGenerator()
    if not config.has_api_key:
        logger.warning("GOOGLE_AI_API_KEY is not set; analysis requests will fail until it is configured")
    return GeminiGenerator(
        api_key=config.GOOGLE_AI_API_KEY,
        model_name=config.MODEL_NAME,
        base_url=config.GEMINI_API_URL,
        timeout=config.REQUEST_TIMEOUT,
    )
