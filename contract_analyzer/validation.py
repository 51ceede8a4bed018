"""
Validation gate around the generative service call.

Requests are checked before the service is contacted, and the service output
is checked before and after parsing. Every rejection raises an exception that
carries the user-facing message and the HTTP status code to report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from config.settings import Settings, settings as default_settings
from contract_analyzer.exceptions import ExtractionError, IncompleteResponseError, ValidationError
from contract_analyzer.models import ParsedReport

logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass(frozen=True)
class DocumentPayload:
    """
    A validated document ready to be sent for analysis.

    Attributes:
        filename: Name of the uploaded document.
        text: Plain text content, or the original data URI for binary files.
        mime_type: "text" for plain text, otherwise the data URI mime type.
        data: Base64 payload for binary files, None for plain text.
        truncated: Whether plain text was cut down to the maximum length.
    """

    filename: str
    text: str
    mime_type: str = "text"
    data: Optional[str] = None
    truncated: bool = False

    @property
    def is_binary(self) -> bool:
        return self.data is not None

    @property
    def is_docx(self) -> bool:
        return self.mime_type == DOCX_MIME_TYPE


def parse_data_uri(text: str) -> tuple[str, str]:
    """
    Split a ``data:<mime>;base64,<data>`` URI into ``(mime_type, data)``.

    Missing parts come back as "unknown" and "".
    """
    header, _, data = text.partition(",")
    mime_type = header.split(";")[0].partition(":")[2] or "unknown"
    return mime_type, data


def validate_request(
    payload: Mapping[str, Any],
    config: Optional[Settings] = None,
) -> DocumentPayload:
    """
    Validate an analysis request before contacting the AI service.

    Args:
        payload: Request body with "text" and "filename".
        config: Settings to read limits from (defaults to global settings).

    Returns:
        DocumentPayload with plain text truncated to the maximum length.

    Raises:
        ValidationError: If a field is missing, mistyped, empty or too short.
    """
    config = config or default_settings
    text = payload.get("text")
    filename = payload.get("filename")

    if not text:
        raise ValidationError("Missing text field", field="text")
    if not filename:
        raise ValidationError("Missing filename field", field="filename")
    if not isinstance(text, str):
        raise ValidationError("Invalid text format, expected string", field="text")
    if not isinstance(filename, str):
        raise ValidationError("Invalid filename format, expected string", field="filename")

    if text.startswith("data:"):
        mime_type, data = parse_data_uri(text)
        logger.info(f"Detected binary data of type: {mime_type}")
        return DocumentPayload(filename=filename, text=text, mime_type=mime_type, data=data)

    stripped = text.strip()
    if not stripped:
        raise ValidationError("Empty document content", field="text")
    if len(stripped) < config.MIN_TEXT_LENGTH:
        raise ValidationError(
            "Document content too short for analysis", field="text", value=stripped
        )

    truncated = False
    if len(text) > config.MAX_TEXT_LENGTH:
        logger.warning(
            f"Text exceeds maximum length ({len(text)} > {config.MAX_TEXT_LENGTH}), truncating"
        )
        text = text[: config.MAX_TEXT_LENGTH]
        truncated = True

    return DocumentPayload(filename=filename, text=text, truncated=truncated)


def validate_response(markdown: Optional[str], config: Optional[Settings] = None) -> str:
    """
    Reject service responses too short to be a real report.

    Raises:
        IncompleteResponseError: If the response is empty or too short.
    """
    config = config or default_settings
    length = len(markdown.strip()) if markdown else 0
    if length < config.MIN_RESPONSE_LENGTH:
        raise IncompleteResponseError(length=length)
    return markdown


def validate_report(report: ParsedReport, markdown: str = "") -> ParsedReport:
    """
    Reject reports with no summary and no items.

    Raises:
        ExtractionError: If nothing meaningful was parsed.
    """
    if not report.has_content:
        raise ExtractionError(text_sample=markdown or None)
    return report
