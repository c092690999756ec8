"""
Error taxonomy for the Receipt Store.

Request-level errors carry the HTTP status they are surfaced with; the
handlers in ``receipt_store.main`` turn them into ``{success, message}``
bodies.
"""
from __future__ import annotations


class ReceiptStoreError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReceiptStoreError):
    """Missing or malformed client input."""
    status_code = 400


class NotFoundError(ReceiptStoreError):
    status_code = 404


class AuthorizationError(ReceiptStoreError):
    """Caller does not own the receipt it is acting on."""
    status_code = 403


class UploadError(ReceiptStoreError):
    status_code = 500


# ---------------------------------------------------------------------------
# Summarization client errors (degraded to a fallback summary, never surfaced)
# ---------------------------------------------------------------------------

class SummarizationError(Exception):
    """Base for failures talking to the summarization model."""


class ConfigurationError(SummarizationError):
    """No API credential is configured."""


class UpstreamError(SummarizationError):
    """The HTTP call failed, returned an error status, or timed out."""


class EmptyResponseError(SummarizationError):
    """The model answered but no summary text could be located."""


# ---------------------------------------------------------------------------
# Crypto
# ---------------------------------------------------------------------------

class DecryptionError(Exception):
    """Authentication tag mismatch: the envelope was tampered with or the key changed."""
