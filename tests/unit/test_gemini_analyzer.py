"""Unit tests for GeminiAnalyzer.

Runs the real analyzer against httpx.MockTransport handlers that emulate the
generateContent endpoint.
"""

import json

import httpx
import pytest
import pytest_check as check

from highway_assist.analysis.gemini_client import UNAVAILABLE_MESSAGE
from highway_assist.errors import ProtocolError, RemoteServiceError, ServiceConnectionError
from highway_assist.models import DocumentType
from tests.fakes import gemini_analyzer, gemini_reply

PAYLOAD = "JVBERi0xLjQK"


def reply_handler(payload: dict, status_code: int = 200, captured: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        return httpx.Response(status_code, json=payload)

    return handler


class TestAnalyzePdf:
    """Tests for PDF analysis requests."""

    async def test_sends_inline_pdf_with_prompt(self) -> None:
        captured: list[httpx.Request] = []
        analyzer = gemini_analyzer(reply_handler(gemini_reply("All compliant."), captured=captured))

        await analyzer.analyze_pdf(PAYLOAD, "schedule_b.pdf", DocumentType.HIGHWAY)
        await analyzer.aclose()

        request = captured[0]
        body = json.loads(request.content)
        prompt, document = body["contents"][0]["parts"]
        check.is_true(request.url.path.endswith("/models/gemini-1.5-flash:generateContent"))
        check.equal(request.headers["x-goog-api-key"], "test-key")
        check.equal(document["inline_data"], {"mime_type": "application/pdf", "data": PAYLOAD})
        check.is_in("schedule_b.pdf", prompt["text"])
        check.equal(body["generationConfig"]["temperature"], 0.3)
        check.equal(body["generationConfig"]["maxOutputTokens"], 8192)

    async def test_general_prompt_does_not_quote_filename(self) -> None:
        captured: list[httpx.Request] = []
        analyzer = gemini_analyzer(reply_handler(gemini_reply("Fine."), captured=captured))

        await analyzer.analyze_pdf(PAYLOAD, "minutes.pdf", DocumentType.GENERAL)
        await analyzer.aclose()

        prompt = json.loads(captured[0].content)["contents"][0]["parts"][0]["text"]
        assert "minutes.pdf" not in prompt

    async def test_returns_enriched_result(self) -> None:
        text = "Issue: camber not present.\n<subtask4>\nCamber is missing.\n"
        analyzer = gemini_analyzer(reply_handler(gemini_reply(text)))

        result = await analyzer.analyze_pdf(PAYLOAD, "road.pdf")
        await analyzer.aclose()

        check.is_true(result.success)
        check.equal(result.analysis, text)
        check.equal(result.compliance_score, 90)
        check.is_true(result.issues)

    async def test_joins_candidate_parts(self) -> None:
        payload = {"candidates": [{"content": {"parts": [{"text": "Part one. "}, {"text": "Part two."}]}}]}
        analyzer = gemini_analyzer(reply_handler(payload))

        result = await analyzer.analyze_pdf(PAYLOAD, "doc.pdf", DocumentType.GENERAL)
        await analyzer.aclose()

        assert result.analysis == "Part one. Part two."

    async def test_missing_api_key_fails_without_request(self) -> None:
        captured: list[httpx.Request] = []
        analyzer = gemini_analyzer(reply_handler(gemini_reply("x"), captured=captured), api_key="")

        result = await analyzer.analyze_pdf(PAYLOAD, "doc.pdf")
        await analyzer.aclose()

        check.is_false(analyzer.is_available)
        check.is_false(result.success)
        check.equal(result.error, UNAVAILABLE_MESSAGE)
        check.equal(captured, [])


class TestErrors:
    """Tests for error mapping."""

    async def test_error_status_raises_remote_error(self) -> None:
        payload = {"error": {"code": 400, "message": "Request payload size exceeds the limit"}}
        analyzer = gemini_analyzer(reply_handler(payload, status_code=400))

        with pytest.raises(RemoteServiceError, match="Gemini analysis failed: Request payload size") as exc_info:
            await analyzer.analyze_pdf(PAYLOAD, "doc.pdf")
        await analyzer.aclose()

        assert exc_info.value.status_code == 400

    async def test_blocked_prompt_raises_remote_error(self) -> None:
        analyzer = gemini_analyzer(reply_handler({"promptFeedback": {"blockReason": "SAFETY"}}))

        with pytest.raises(RemoteServiceError, match="SAFETY"):
            await analyzer.analyze_pdf(PAYLOAD, "doc.pdf")
        await analyzer.aclose()

    async def test_no_candidates_raises_protocol_error(self) -> None:
        analyzer = gemini_analyzer(reply_handler({"candidates": []}))

        with pytest.raises(ProtocolError):
            await analyzer.analyze_pdf(PAYLOAD, "doc.pdf")
        await analyzer.aclose()

    async def test_empty_text_raises_protocol_error(self) -> None:
        analyzer = gemini_analyzer(reply_handler(gemini_reply("")))

        with pytest.raises(ProtocolError, match="no text"):
            await analyzer.analyze_pdf(PAYLOAD, "doc.pdf")
        await analyzer.aclose()

    async def test_connection_failure_raises_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Name or service not known", request=request)

        analyzer = gemini_analyzer(handler)

        with pytest.raises(ServiceConnectionError, match="Gemini"):
            await analyzer.analyze_pdf(PAYLOAD, "doc.pdf")
        await analyzer.aclose()


class TestTextAnalysis:
    """Tests for analysis of extracted text and questions."""

    async def test_analyze_text_embeds_content(self) -> None:
        captured: list[httpx.Request] = []
        analyzer = gemini_analyzer(reply_handler(gemini_reply("Looks complete."), captured=captured))

        result = await analyzer.analyze_text("Formation width 12 m")
        await analyzer.aclose()

        parts = json.loads(captured[0].content)["contents"][0]["parts"]
        check.equal(len(parts), 1)
        check.is_in("Formation width 12 m", parts[0]["text"])
        check.is_true(result.success)

    async def test_ask_question(self) -> None:
        captured: list[httpx.Request] = []
        analyzer = gemini_analyzer(reply_handler(gemini_reply("The median is 5 m."), captured=captured))

        result = await analyzer.ask_question("How wide is the median?", "Median 5 m")
        await analyzer.aclose()

        text = json.loads(captured[0].content)["contents"][0]["parts"][0]["text"]
        check.is_in("How wide is the median?", text)
        check.is_in("Median 5 m", text)
        check.equal(result.analysis, "The median is 5 m.")
        check.equal(result.summary, "Question answered successfully")
