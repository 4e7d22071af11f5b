"""Gemini document analyzer over the Generative Language REST API.

PDFs are sent inline as base64 next to the analysis prompt; the free-text
answer goes through the enrichment pass to recover structured findings.
"""

import logging
from typing import Any

import httpx

from highway_assist.analysis.config import AnalyzerConfig, get_analyzer_config
from highway_assist.analysis.enrichment import enrich
from highway_assist.analysis.prompts import analysis_prompt, pdf_requirements, question_prompt
from highway_assist.errors import ProtocolError, RemoteServiceError, ServiceConnectionError
from highway_assist.models import AnalysisResult, DocumentType

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Gemini AI service is not available. Please check your API key."


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
        message = payload["error"]["message"]
    except (ValueError, KeyError, TypeError):
        message = f"{response.status_code} {response.reason_phrase}"
    return f"Gemini analysis failed: {message}"


def _response_text(payload: Any) -> str:
    """Join the text parts of the first candidate.

    Raises:
        RemoteServiceError: The prompt was blocked.
        ProtocolError: No candidate text in the response.
    """
    if not isinstance(payload, dict):
        raise ProtocolError("Gemini response is not a JSON object")

    block_reason = (payload.get("promptFeedback") or {}).get("blockReason")
    if block_reason:
        raise RemoteServiceError(f"Gemini blocked the request: {block_reason}")

    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as e:
        raise ProtocolError("Gemini response has no candidate content") from e

    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    if not text:
        raise ProtocolError("Gemini response candidate has no text")
    return text


class GeminiAnalyzer:
    """Document analysis via Gemini's generateContent endpoint."""

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or get_analyzer_config()
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.request_timeout,
            transport=transport,
        )

    @property
    def is_available(self) -> bool:
        return bool(self._config.api_key)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _generation_config(self) -> dict[str, Any]:
        return {
            "temperature": self._config.temperature,
            "topK": self._config.top_k,
            "topP": self._config.top_p,
            "maxOutputTokens": self._config.max_output_tokens,
        }

    async def _generate(self, parts: list[dict[str, Any]]) -> str:
        body = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": self._generation_config(),
        }
        try:
            response = await self._client.post(
                f"/models/{self._config.model_name}:generateContent",
                json=body,
                headers={"x-goog-api-key": self._config.api_key},
            )
        except httpx.RequestError as e:
            logger.error(f"Gemini request failed: {e}")
            raise ServiceConnectionError(f"Connection to Gemini failed: {e}") from e

        if response.is_error:
            raise RemoteServiceError(_error_message(response), status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ProtocolError(f"Gemini response is not valid JSON: {e}") from e
        return _response_text(payload)

    async def analyze_pdf(
        self,
        payload_b64: str,
        filename: str,
        document_type: DocumentType = DocumentType.HIGHWAY,
    ) -> AnalysisResult:
        """Analyze a base64-encoded PDF.

        Args:
            payload_b64: The PDF bytes, base64 encoded.
            filename: Original filename, quoted in the prompt.
            document_type: Selects the prompt and the enrichment markers.

        Returns:
            Enriched AnalysisResult, or a failed one if the analyzer is unavailable.

        Raises:
            ServiceConnectionError: Transport failed or timed out.
            RemoteServiceError: Gemini returned an error or blocked the prompt.
            ProtocolError: The response had no analysis text.
        """
        if not self.is_available:
            return AnalysisResult.failure(UNAVAILABLE_MESSAGE)

        prompt = analysis_prompt(document_type)
        if document_type is DocumentType.HIGHWAY:
            prompt += pdf_requirements(filename)

        logger.info(f"Starting Gemini analysis of {filename} ({document_type.value})")
        text = await self._generate(
            [
                {"text": prompt},
                {"inline_data": {"mime_type": "application/pdf", "data": payload_b64}},
            ]
        )
        logger.info(f"Gemini analysis completed for {filename}")
        return enrich(text, document_type)

    async def analyze_text(
        self,
        content: str,
        document_type: DocumentType = DocumentType.GENERAL,
    ) -> AnalysisResult:
        """Analyze already-extracted document text."""
        if not self.is_available:
            return AnalysisResult.failure(UNAVAILABLE_MESSAGE)

        prompt = f"{analysis_prompt(document_type)}\n\nDocument Content:\n{content}"
        text = await self._generate([{"text": prompt}])
        return enrich(text, document_type)

    async def ask_question(self, question: str, context: str) -> AnalysisResult:
        """Answer a question about a document's text."""
        if not self.is_available:
            return AnalysisResult.failure(UNAVAILABLE_MESSAGE)

        text = await self._generate([{"text": question_prompt(question, context)}])
        return AnalysisResult(success=True, analysis=text, summary="Question answered successfully")
