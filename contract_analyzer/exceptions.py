"""
Custom exceptions for the Contract Analyzer.

This module provides a hierarchy of domain-specific exceptions. Each one
carries the HTTP status code the API layer reports for it, so callers can
surface a user-facing message without inspecting the exception type.
"""

from __future__ import annotations

from typing import Optional


class ContractAnalyzerError(Exception):
    """
    Base exception for all Contract Analyzer errors.

    Attributes:
        message: Human-readable error message.
        details: Optional additional context for debugging.
        status_code: HTTP status code reported to API clients.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ContractAnalyzerError):
    """Raised when an analysis request fails the validation gate."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid analysis request",
        field: Optional[str] = None,
        value: Optional[str] = None,
    ) -> None:
        details = {}
        if field:
            details["field"] = field
        if value:
            details["value"] = str(value)[:100]
        self.field = field
        super().__init__(message, details)


class GenerationError(ContractAnalyzerError):
    """Raised when the generative AI service call fails."""

    def __init__(
        self,
        message: str = "Error calling generative AI service",
        status_code: int = 500,
        reason: Optional[str] = None,
    ) -> None:
        details = {"reason": reason} if reason else {}
        self.reason = reason
        super().__init__(message, details, status_code=status_code)


class IncompleteResponseError(ContractAnalyzerError):
    """Raised when the AI service returns too little text to analyze."""

    def __init__(
        self,
        message: str = "The AI service returned an incomplete response. Please try again.",
        length: Optional[int] = None,
    ) -> None:
        details = {"length": length} if length is not None else {}
        super().__init__(message, details)


class ExtractionError(ContractAnalyzerError):
    """Raised when no meaningful sections could be extracted from a report."""

    def __init__(
        self,
        message: str = "Failed to extract meaningful analysis from the document. Please try again.",
        text_sample: Optional[str] = None,
    ) -> None:
        details = {}
        if text_sample:
            # Truncate for readability
            details["text_sample"] = text_sample[:100] + "..." if len(text_sample) > 100 else text_sample
        super().__init__(message, details)
