"""
Unit tests for the report generators.

The Gemini REST API is never contacted: requests are sent through a mocked
requests.Session.
"""

import pytest
from unittest.mock import MagicMock

import requests

pytestmark = pytest.mark.unit


@pytest.fixture
def text_document():
    from contract_analyzer.validation import DocumentPayload

    return DocumentPayload(filename="c.txt", text="Contract text")


@pytest.fixture
def pdf_document():
    from contract_analyzer.validation import DocumentPayload

    return DocumentPayload(
        filename="c.pdf",
        text="data:application/pdf;base64,JVBERi0x",
        mime_type="application/pdf",
        data="JVBERi0x",
    )


def _response(status_code: int = 200, body=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = "Error"
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def _generator(session: MagicMock, api_key: str = "test-key"):
    from contract_analyzer.generator import GeminiGenerator

    return GeminiGenerator(
        api_key=api_key,
        model_name="gemini-test",
        base_url="https://example.test/v1beta/",
        timeout=5,
        session=session,
    )


class TestGeminiGenerator:
    """Tests for GeminiGenerator."""

    def test_endpoint(self):
        """Verify the generateContent endpoint is built from settings."""
        generator = _generator(MagicMock())

        assert generator.endpoint == "https://example.test/v1beta/models/gemini-test:generateContent"

    def test_generate_returns_text(self, text_document):
        """Verify the candidate text parts are joined and returned."""
        session = MagicMock()
        session.post.return_value = _response(body={
            "candidates": [{"content": {"parts": [{"text": "# Report\n"}, {"text": "Body"}]}}]
        })

        text = _generator(session).generate("prompt", text_document)

        assert text == "# Report\nBody"

    def test_request_shape(self, text_document):
        """Verify the API key header, prompt, safety settings and timeout."""
        from contract_analyzer.generator import SAFETY_SETTINGS

        session = MagicMock()
        session.post.return_value = _response(body={"candidates": []})

        _generator(session).generate("the prompt", text_document)

        kwargs = session.post.call_args.kwargs
        assert kwargs["headers"] == {"x-goog-api-key": "test-key"}
        assert kwargs["timeout"] == 5
        assert kwargs["json"]["contents"][0]["parts"] == [{"text": "the prompt"}]
        assert kwargs["json"]["safetySettings"] == SAFETY_SETTINGS

    def test_binary_sent_inline(self, pdf_document):
        """Verify binary documents are attached as inline data."""
        generator = _generator(MagicMock())

        parts = generator.build_payload("prompt", pdf_document)["contents"][0]["parts"]

        assert parts[1] == {"inlineData": {"mimeType": "application/pdf", "data": "JVBERi0x"}}

    def test_missing_api_key(self, text_document):
        """Verify a missing key fails before any request is made."""
        from contract_analyzer.exceptions import GenerationError
        from contract_analyzer.generator import API_KEY_MISSING_MESSAGE

        session = MagicMock()

        with pytest.raises(GenerationError) as exc_info:
            _generator(session, api_key="  ").generate("prompt", text_document)

        assert exc_info.value.message == API_KEY_MISSING_MESSAGE
        assert exc_info.value.status_code == 500
        session.post.assert_not_called()

    def test_timeout(self, text_document):
        """Verify timeouts map to 504."""
        from contract_analyzer.exceptions import GenerationError
        from contract_analyzer.generator import TIMEOUT_MESSAGE

        session = MagicMock()
        session.post.side_effect = requests.Timeout("read timed out")

        with pytest.raises(GenerationError) as exc_info:
            _generator(session).generate("prompt", text_document)

        assert exc_info.value.message == TIMEOUT_MESSAGE
        assert exc_info.value.status_code == 504

    def test_connection_error(self, text_document):
        """Verify transport failures map to the generic service error."""
        from contract_analyzer.exceptions import GenerationError

        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(GenerationError) as exc_info:
            _generator(session).generate("prompt", text_document)

        assert exc_info.value.message == "Error calling generative AI service"
        assert exc_info.value.reason == "refused"

    def test_quota_error_response(self, text_document):
        """Verify error bodies from the service are mapped by status."""
        from contract_analyzer.exceptions import GenerationError

        session = MagicMock()
        session.post.return_value = _response(429, {
            "error": {"status": "RESOURCE_EXHAUSTED", "message": "Quota exceeded"}
        })

        with pytest.raises(GenerationError) as exc_info:
            _generator(session).generate("prompt", text_document)

        assert exc_info.value.status_code == 429
        assert exc_info.value.reason == "RESOURCE_EXHAUSTED: Quota exceeded"

    def test_error_response_without_json(self, text_document):
        """Verify non-JSON error responses still produce a GenerationError."""
        from contract_analyzer.exceptions import GenerationError

        session = MagicMock()
        session.post.return_value = _response(502, ValueError("not json"))

        with pytest.raises(GenerationError) as exc_info:
            _generator(session).generate("prompt", text_document)

        assert exc_info.value.status_code == 500
        assert exc_info.value.reason == "502 Error"

    def test_invalid_json_success(self, text_document):
        """Verify an unparseable success body is a service error."""
        from contract_analyzer.exceptions import GenerationError

        session = MagicMock()
        session.post.return_value = _response(200, ValueError("bad"))

        with pytest.raises(GenerationError):
            _generator(session).generate("prompt", text_document)


class TestMapServiceError:
    """Tests for map_service_error."""

    @pytest.mark.parametrize("error_text,status_code", [
        ("RESOURCE_EXHAUSTED: quota", 429),
        ("INVALID_ARGUMENT: bad request", 400),
        ("PERMISSION_DENIED: key", 403),
        ("FAILED_PRECONDITION: region", 412),
        ("INTERNAL: oops", 500),
    ])
    def test_status_codes(self, error_text: str, status_code: int):
        """Verify each service failure kind maps to its status code."""
        from contract_analyzer.generator import map_service_error

        assert map_service_error(error_text).status_code == status_code

    def test_messages(self):
        """Verify user-facing messages."""
        from contract_analyzer.generator import map_service_error

        assert map_service_error("RESOURCE_EXHAUSTED").message == (
            "AI service quota exceeded. Please try again later."
        )
        assert map_service_error("UNAVAILABLE").message == "Error calling generative AI service"

    def test_unsupported_docx(self):
        """Verify DOCX mime type rejections get a format-specific message."""
        from contract_analyzer.generator import DOCX_UNSUPPORTED_MESSAGE, map_service_error
        from contract_analyzer.validation import DOCX_MIME_TYPE, DocumentPayload

        document = DocumentPayload(
            filename="c.docx", text="data:...", mime_type=DOCX_MIME_TYPE, data="UEsDBA"
        )
        error = map_service_error("Unsupported: mimeType parameter is not supported", document)

        assert error.status_code == 400
        assert error.message == DOCX_UNSUPPORTED_MESSAGE


class TestExtractResponseText:
    """Tests for extract_response_text."""

    def test_no_candidates(self):
        """Verify a blocked or empty response yields an empty string."""
        from contract_analyzer.generator import extract_response_text

        assert extract_response_text({"promptFeedback": {"blockReason": "SAFETY"}}) == ""
        assert extract_response_text({}) == ""

    def test_missing_parts(self):
        """Verify candidates without content yield an empty string."""
        from contract_analyzer.generator import extract_response_text

        assert extract_response_text({"candidates": [{"finishReason": "SAFETY"}]}) == ""


class TestMockGenerator:
    """Tests for MockGenerator and generator selection."""

    def test_sample_report_parses(self, text_document):
        """Verify the canned report has every section and real items."""
        from contract_analyzer.generator import MockGenerator
        from contract_analyzer.report import parse_report
        from contract_analyzer.sections import extract_sections

        markdown = MockGenerator().generate("prompt", text_document)
        report = parse_report(markdown)

        assert len(extract_sections(markdown).found) == 10
        assert [c.title for c in report.key_clauses] == [
            "Limitation of Liability",
            "Termination",
            "Confidentiality",
            "Intellectual Property",
            "Invoicing",
        ]
        assert len(report.risks) == 4

    def test_satisfies_protocol(self):
        """Verify both generators implement ReportGenerator."""
        from contract_analyzer.generator import GeminiGenerator, MockGenerator, ReportGenerator

        assert isinstance(MockGenerator(), ReportGenerator)
        assert isinstance(GeminiGenerator(api_key="k", session=MagicMock()), ReportGenerator)

    def test_create_generator(self):
        """Verify configuration selects the generator."""
        from config.settings import Settings
        from contract_analyzer.generator import GeminiGenerator, MockGenerator, create_generator

        assert isinstance(create_generator(Settings(USE_MOCK_GENERATOR=True)), MockGenerator)

        generator = create_generator(Settings(GOOGLE_AI_API_KEY="k", MODEL_NAME="gemini-x"))
        assert isinstance(generator, GeminiGenerator)
        assert generator.model_name == "gemini-x"


class TestBuildPrompt:
    """Tests for the analysis prompt."""

    def test_text_prompt_embeds_document(self, text_document):
        """Verify plain text is embedded after the section instructions."""
        from contract_analyzer.prompts import build_prompt

        prompt = build_prompt(text_document)

        assert "## 8. Risks & Red Flags" in prompt
        assert prompt.rstrip().endswith("Contract text")

    def test_binary_prompt(self, pdf_document):
        """Verify binary prompts do not embed the data URI."""
        from contract_analyzer.prompts import DOCX_NOTE, build_prompt

        prompt = build_prompt(pdf_document)

        assert "base64" not in prompt
        assert DOCX_NOTE not in prompt
        assert "## 1. Executive Summary" in prompt

    def test_docx_note(self):
        """Verify DOCX uploads carry the format note."""
        from contract_analyzer.prompts import DOCX_NOTE, build_prompt
        from contract_analyzer.validation import DOCX_MIME_TYPE, DocumentPayload

        document = DocumentPayload(
            filename="c.docx", text="data:...", mime_type=DOCX_MIME_TYPE, data="UEsDBA"
        )

        assert DOCX_NOTE in build_prompt(document)

    def test_prompt_headings_are_extractable(self, text_document):
        """Verify the headings the prompt requests are the ones extraction finds."""
        from contract_analyzer.prompts import REPORT_SECTIONS
        from contract_analyzer.sections import extract_sections

        assert len(extract_sections(REPORT_SECTIONS).found) == 10


class TestCreateGeneratorWarnings:
    """Tests for configuration warnings when building a generator."""

    def test_missing_key_warns(self, caplog):
        """Verify a Gemini generator without a key logs a warning."""
        import logging
        from config.settings import Settings
        from contract_analyzer.generator import create_generator

        with caplog.at_level(logging.WARNING):
            create_generator(Settings(GOOGLE_AI_API_KEY="", _env_file=None))

        assert "GOOGLE_AI_API_KEY is not set" in caplog.text

    def test_configured_key_is_quiet(self, caplog):
        """Verify no warning is logged when a key is configured."""
        import logging
        from config.settings import Settings
        from contract_analyzer.generator import create_generator

        with caplog.at_level(logging.WARNING):
            create_generator(Settings(GOOGLE_AI_API_KEY="k", _env_file=None))

        assert "GOOGLE_AI_API_KEY" not in caplog.text
