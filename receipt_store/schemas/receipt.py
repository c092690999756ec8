"""
Request / response envelopes for the receipt API and the prompt context
consumed by the summarization pipeline.

Pydantic v2 models. Response models serialize with camelCase keys.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class ReceiptCreateRequest(BaseModel):
    """Raw create payload.

    Required-field checks happen in
    :func:`receipt_store.pipeline.normalizer.normalize_payload`, which names
    the missing field in its error.
    """
    model_config = ConfigDict(extra="ignore")

    user_id: Optional[Any] = Field(None, validation_alias=AliasChoices("userId", "user_id"))
    vendor: Optional[Any] = None
    date: Optional[Any] = None
    items: Optional[Any] = None
    total: Optional[Any] = None
    cloudinary_file_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("cloudinaryFileUrl", "cloudinary_url")
    )
    ocr_text: Optional[Any] = Field(None, validation_alias=AliasChoices("ocrText", "ocr_text"))
    ocr_json: Optional[Any] = Field(None, validation_alias=AliasChoices("ocrJson", "ocr_json"))
    document_type: Optional[str] = Field(
        None, validation_alias=AliasChoices("documentType", "document_type")
    )


# ---------------------------------------------------------------------------
# Normalized input + prompt context
# ---------------------------------------------------------------------------

class NormalizedReceipt(BaseModel):
    user_id: str
    vendor: str
    date: datetime
    items: list[str]
    total_amount: float
    total_raw: str
    date_raw: str


class PromptContext(BaseModel):
    """Everything the prompt compiler needs for one request."""
    cloudinary_file_url: Optional[str] = None
    document_type: Optional[str] = None
    ocr_text: Optional[str] = None
    ocr_json: Optional[Any] = None
    receipt: Optional[dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class ReceiptOut(_CamelModel):
    id: str
    user_id: str
    vendor: str
    date: datetime
    cloudinary_url: Optional[str] = None
    raw_items: list[str]
    total_amount: float
    created_at: datetime


class ReceiptListItem(_CamelModel):
    id: str
    vendor: str
    date: datetime
    cloudinary_url: Optional[str] = None
    total_amount: float
    created_at: datetime


class ReceiptResponse(BaseModel):
    success: bool = True
    receipt: ReceiptOut
    summary: str


class ReceiptListResponse(BaseModel):
    success: bool = True
    receipts: list[ReceiptListItem] = Field(default_factory=list)


class UploadResponse(_CamelModel):
    success: bool = True
    url: str
    public_id: str
    resource_type: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str
