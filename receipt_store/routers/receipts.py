"""
Receipt Store API endpoints.

POST   /api/receipts          — create receipt + encrypted AI summary
POST   /api/receipts/upload   — upload a raw image/PDF to Cloudinary
GET    /api/receipts          — list a user's receipts (no summaries)
GET    /api/receipts/{id}     — get one receipt with decrypted summary
DELETE /api/receipts/{id}     — delete a receipt (owner check if userId given)
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from receipt_store import pipeline
from receipt_store.config import settings
from receipt_store.database import get_db
from receipt_store.dependencies import get_blob_store, get_extractor, get_summarizer, get_vault
from receipt_store.errors import UploadError, ValidationError
from receipt_store.pipeline.extractor import TextExtractor
from receipt_store.pipeline.summarizer import GeminiSummarizer
from receipt_store.pipeline.vault import CryptoVault
from receipt_store.schemas import (
    MessageResponse,
    ReceiptCreateRequest,
    ReceiptListItem,
    ReceiptListResponse,
    ReceiptOut,
    ReceiptResponse,
    UploadResponse,
)
from receipt_store.storage import BlobStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _user_id(camel: Optional[str], snake: Optional[str]) -> str:
    return (camel or snake or "").strip()


# ── POST /api/receipts ───────────────────────────────────────────────────
@router.post("/receipts", response_model=ReceiptResponse, status_code=201)
def create_receipt(
    req: ReceiptCreateRequest,
    db: Session = Depends(get_db),
    vault: CryptoVault = Depends(get_vault),
    summarizer: GeminiSummarizer = Depends(get_summarizer),
    extractor: TextExtractor = Depends(get_extractor),
):
    record, summary = pipeline.create_receipt(
        db, req, vault=vault, summarizer=summarizer, extractor=extractor
    )
    return ReceiptResponse(receipt=ReceiptOut.model_validate(record), summary=summary)


# ── POST /api/receipts/upload ────────────────────────────────────────────
@router.post("/receipts/upload", response_model=UploadResponse, status_code=201)
def upload_file(
    file: Optional[UploadFile] = File(None),
    blob_store: BlobStore = Depends(get_blob_store),
):
    if file is None:
        raise ValidationError("No file uploaded. Please include a file field.")

    data = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if not data:
        raise ValidationError("Uploaded file buffer is empty.")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"File too large; the limit is {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MB."
        )

    logger.info("Upload: filename=%s  size=%d", file.filename, len(data))
    try:
        result = blob_store.upload(data, file.filename)
    except Exception as e:
        logger.exception("Cloudinary upload failed: %s", e)
        raise UploadError("Failed to upload file to Cloudinary") from e

    return UploadResponse(
        url=result["secure_url"],
        public_id=result["public_id"],
        resource_type=result["resource_type"],
    )


# ── GET /api/receipts ────────────────────────────────────────────────────
@router.get("/receipts", response_model=ReceiptListResponse)
def list_receipts(
    user_id: Optional[str] = Query(None, alias="userId"),
    user_id_snake: Optional[str] = Query(None, alias="user_id"),
    db: Session = Depends(get_db),
):
    owner = _user_id(user_id, user_id_snake)
    if not owner:
        raise ValidationError("userId (or user_id) query parameter is required")
    rows = pipeline.list_receipts(db, owner)
    return ReceiptListResponse(receipts=[ReceiptListItem.model_validate(r) for r in rows])


# ── GET /api/receipts/{receipt_id} ───────────────────────────────────────
@router.get("/receipts/{receipt_id}", response_model=ReceiptResponse)
def get_receipt(
    receipt_id: str,
    db: Session = Depends(get_db),
    vault: CryptoVault = Depends(get_vault),
):
    logger.info("Fetching receipt: %s", receipt_id)
    record, summary = pipeline.get_receipt(db, receipt_id, vault=vault)
    return ReceiptResponse(receipt=ReceiptOut.model_validate(record), summary=summary)


# ── DELETE /api/receipts/{receipt_id} ────────────────────────────────────
@router.delete("/receipts/{receipt_id}", response_model=MessageResponse)
def delete_receipt(
    receipt_id: str,
    user_id: Optional[str] = Query(None, alias="userId"),
    user_id_snake: Optional[str] = Query(None, alias="user_id"),
    db: Session = Depends(get_db),
):
    pipeline.delete_receipt(db, receipt_id, _user_id(user_id, user_id_snake) or None)
    return MessageResponse(message="Receipt deleted successfully")
