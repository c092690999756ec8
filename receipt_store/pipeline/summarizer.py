"""
Gemini summarization client.

One synchronous ``generateContent`` call per receipt, bounded by a timeout,
no retries. Failures surface as typed ``SummarizationError`` subclasses; the
orchestrator decides how to degrade.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from receipt_store.errors import ConfigurationError, EmptyResponseError, UpstreamError
from receipt_store.pipeline.prompt import DEFAULT_REGIONAL_LANGUAGE, PromptTemplate, build_prompt
from receipt_store.schemas import PromptContext

logger = logging.getLogger(__name__)


def extract_summary_text(data: Any) -> str:
    """Pull the summary text out of a ``generateContent`` response body.

    Joins every text part of the first candidate, in order; falls back to a
    top-level ``output_text`` string. Returns ``""`` when neither is present.
    """
    if not isinstance(data, dict):
        return ""

    text = ""
    candidates = data.get("candidates")
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
        content = candidates[0].get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if isinstance(parts, list):
            text = "".join(
                p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
            )

    if not text and isinstance(data.get("output_text"), str):
        text = data["output_text"]
    return text


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.reason_phrase


class GeminiSummarizer:
    def __init__(
        self,
        api_key: str,
        endpoint: str,
        timeout: float = 30.0,
        template: PromptTemplate | str = PromptTemplate.ENGLISH,
        language: str = DEFAULT_REGIONAL_LANGUAGE,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self.template = PromptTemplate(template)
        self.language = language
        self._transport = transport
        if not api_key:
            logger.warning("GEMINI_API_KEY is not set; receipt summaries will fail until it is configured")

    @classmethod
    def from_settings(cls, settings) -> "GeminiSummarizer":
        return cls(
            api_key=settings.GEMINI_API_KEY,
            endpoint=settings.gemini_endpoint,
            timeout=settings.GEMINI_TIMEOUT_SECONDS,
            template=settings.SUMMARY_TEMPLATE,
            language=settings.SUMMARY_REGIONAL_LANGUAGE,
        )

    def summarize(self, context: PromptContext) -> str:
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY is not configured")

        prompt = build_prompt(context, self.template, self.language)
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                # Key stays out of the URL; httpx logs request URLs
                response = client.post(
                    self.endpoint,
                    headers={"x-goog-api-key": self.api_key},
                    json=payload,
                )
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Gemini request timed out after {self.timeout:g}s") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Gemini request failed: {e}") from e

        if response.status_code >= 400:
            raise UpstreamError(_error_detail(response))

        try:
            data = response.json()
        except ValueError as e:
            raise EmptyResponseError("Gemini returned a non-JSON body") from e

        text = extract_summary_text(data).strip()
        if not text:
            raise EmptyResponseError("No summary text returned from Gemini")
        logger.info("Gemini summary received (%d chars)", len(text))
        return text
