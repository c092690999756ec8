from receipt_store.schemas.receipt import (
    MessageResponse,
    NormalizedReceipt,
    PromptContext,
    ReceiptCreateRequest,
    ReceiptListItem,
    ReceiptListResponse,
    ReceiptOut,
    ReceiptResponse,
    UploadResponse,
)

__all__ = [
    "MessageResponse",
    "NormalizedReceipt",
    "PromptContext",
    "ReceiptCreateRequest",
    "ReceiptListItem",
    "ReceiptListResponse",
    "ReceiptOut",
    "ReceiptResponse",
    "UploadResponse",
]
