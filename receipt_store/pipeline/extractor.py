"""
Document text extractor.

Downloads a stored receipt file and pulls its text out: pdfplumber for PDFs,
Tesseract OCR for everything else. Extraction is fail‑soft: any problem is
logged and reported as empty text so receipt creation carries on.
"""
from __future__ import annotations

import io
import logging
from typing import NamedTuple, Optional
from urllib.parse import urlparse

import httpx
import pdfplumber
import pytesseract
from PIL import Image

logger = logging.getLogger(__name__)


class Extraction(NamedTuple):
    """Extracted text plus, when extraction was skipped, why."""
    text: str
    skipped: Optional[str] = None


def is_pdf(url: str, content_type: str = "") -> bool:
    if content_type and "pdf" in content_type.lower():
        return True
    if not url:
        return False
    return urlparse(url).path.lower().endswith(".pdf")


class TextExtractor:
    def __init__(
        self,
        timeout: float = 20.0,
        language: str = "eng",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout = timeout
        self.language = language
        self._transport = transport

    @classmethod
    def from_settings(cls, settings) -> "TextExtractor":
        return cls(
            timeout=settings.OCR_FETCH_TIMEOUT_SECONDS,
            language=settings.OCR_LANGUAGE,
        )

    # ── fetch ────────────────────────────────────────────────────────────
    def fetch(self, url: str) -> tuple[bytes, str]:
        with httpx.Client(
            timeout=self.timeout, follow_redirects=True, transport=self._transport
        ) as client:
            response = client.get(url)
            response.raise_for_status()
        return response.content, response.headers.get("content-type", "").lower()

    # ── strategies ───────────────────────────────────────────────────────
    def pdf_to_text(self, data: bytes) -> str:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
        return "\n".join(pages).strip()

    def image_to_text(self, data: bytes) -> str:
        with Image.open(io.BytesIO(data)) as img:
            text = pytesseract.image_to_string(img, lang=self.language)
        return (text or "").strip()

    # ── public API ───────────────────────────────────────────────────────
    def extract(self, url: str) -> Extraction:
        if not url:
            return Extraction("", "no url")
        try:
            data, content_type = self.fetch(url)
            if is_pdf(url, content_type):
                logger.info("Extracting PDF text: %s", url)
                return Extraction(self.pdf_to_text(data))
            logger.info("Running OCR (%s): %s", self.language, url)
            return Extraction(self.image_to_text(data))
        except Exception as e:
            logger.warning("Text extraction failed for %s: %s", url, e)
            return Extraction("", str(e) or type(e).__name__)

    def extract_text(self, url: str) -> str:
        """Return the document's text, or ``""`` if it could not be read."""
        return self.extract(url).text
