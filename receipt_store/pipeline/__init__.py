"""
Receipt Store core pipeline.

Orchestrates: normalize → extract text (if needed) → build prompt context →
summarize (fail‑soft) → encrypt → persist, and the matching read path.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from receipt_store import store
from receipt_store.errors import AuthorizationError, NotFoundError
from receipt_store.models import ReceiptModel
from receipt_store.pipeline.extractor import TextExtractor
from receipt_store.pipeline.normalizer import normalize_payload
from receipt_store.pipeline.summarizer import GeminiSummarizer
from receipt_store.pipeline.vault import CryptoVault
from receipt_store.schemas import NormalizedReceipt, PromptContext, ReceiptCreateRequest

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY_PREFIX = "Summary temporarily unavailable:"


def build_context(
    req: ReceiptCreateRequest,
    payload: NormalizedReceipt,
    extractor: Optional[TextExtractor] = None,
) -> PromptContext:
    url = (req.cloudinary_file_url or "").strip() or None
    ocr_text = "" if req.ocr_text is None else str(req.ocr_text)

    # No client-side OCR: read the stored file ourselves
    if not ocr_text and url and extractor is not None:
        ocr_text = extractor.extract_text(url)

    return PromptContext(
        cloudinary_file_url=url,
        document_type=(req.document_type or "").strip() or None,
        ocr_text=ocr_text,
        ocr_json=req.ocr_json,
        receipt={
            "vendor": payload.vendor,
            "date": payload.date_raw,
            "items": payload.items,
            "total": payload.total_raw,
        },
    )


def summarize_or_fallback(summarizer: GeminiSummarizer, context: PromptContext) -> str:
    try:
        return summarizer.summarize(context)
    except Exception as e:
        logger.error("Summarization failed (%s): %s", type(e).__name__, e)
        return f"{FALLBACK_SUMMARY_PREFIX} {str(e) or 'AI service error'}"


def create_receipt(
    db: Session,
    req: ReceiptCreateRequest,
    *,
    vault: CryptoVault,
    summarizer: GeminiSummarizer,
    extractor: Optional[TextExtractor] = None,
) -> tuple[ReceiptModel, str]:
    """Validate, summarize, encrypt and store one receipt.

    Returns ``(record, summary)``; *summary* is plaintext for the response.
    """
    logger.info("Pipeline start — normalize")
    payload = normalize_payload(req)

    logger.info("Pipeline — build prompt context")
    context = build_context(req, payload, extractor)

    logger.info("Pipeline — summarize")
    summary = summarize_or_fallback(summarizer, context)

    logger.info("Pipeline — encrypt and store")
    record = store.create(
        db,
        user_id=payload.user_id,
        vendor=payload.vendor,
        date=payload.date,
        raw_items=payload.items,
        total_amount=payload.total_amount,
        summary_encrypted=vault.encrypt(summary),
        cloudinary_url=context.cloudinary_file_url,
    )
    return record, summary


def get_receipt(db: Session, receipt_id: str, *, vault: CryptoVault) -> tuple[ReceiptModel, str]:
    record = store.get(db, receipt_id)
    if record is None:
        logger.warning("Receipt not found: %s", receipt_id)
        raise NotFoundError("Receipt not found")
    return record, vault.decrypt(record.summary_encrypted)


def list_receipts(db: Session, user_id: str) -> list[ReceiptModel]:
    return store.list_for_user(db, user_id)


def delete_receipt(db: Session, receipt_id: str, user_id: Optional[str] = None) -> None:
    """Delete a receipt; when *user_id* is given it must match the owner."""
    record = store.get(db, receipt_id)
    if record is None:
        raise NotFoundError("Receipt not found")
    if user_id and user_id != record.user_id:
        logger.warning("User %s may not delete receipt %s", user_id, receipt_id)
        raise AuthorizationError("User not authorized to delete this receipt")
    store.delete(db, record)
