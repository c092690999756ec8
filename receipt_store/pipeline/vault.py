"""
Authenticated encryption for receipt summaries at rest.

AES-256-GCM with a key derived as SHA-256 of a configured secret. Envelopes
are ``base64(nonce):base64(ciphertext):base64(tag)``.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from receipt_store.errors import DecryptionError

logger = logging.getLogger(__name__)

FALLBACK_SECRET = "fallback-receipt-secret"
NONCE_BYTES = 12
TAG_BYTES = 16


def derive_key(secret: str) -> bytes:
    return hashlib.sha256(secret.encode("utf-8")).digest()


class CryptoVault:
    def __init__(self, secret: str | None = None):
        if not secret:
            logger.warning(
                "No RECEIPT_ENC_KEY or JWT_SECRET configured; "
                "encrypting summaries with the built-in fallback secret"
            )
            secret = FALLBACK_SECRET
        self._aead = AESGCM(derive_key(secret))

    @classmethod
    def from_settings(cls, settings) -> "CryptoVault":
        return cls(settings.RECEIPT_ENC_KEY or settings.JWT_SECRET)

    def encrypt(self, plaintext: str) -> str:
        nonce = os.urandom(NONCE_BYTES)
        sealed = self._aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        # cryptography appends the tag to the ciphertext
        ciphertext, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]
        return ":".join(
            base64.b64encode(part).decode("ascii") for part in (nonce, ciphertext, tag)
        )

    def decrypt(self, envelope: str | None) -> str:
        """Return the plaintext, or ``""`` when *envelope* is malformed.

        Raises :class:`DecryptionError` when the segments are present but do not
        decode or verify.
        """
        if not envelope:
            return ""
        parts = envelope.split(":")
        if len(parts) != 3 or not all(parts):
            return ""

        try:
            nonce, ciphertext, tag = (base64.b64decode(p, validate=True) for p in parts)
        except (binascii.Error, ValueError) as exc:
            logger.error("Summary envelope is not valid base64")
            raise DecryptionError("summary envelope is corrupt") from exc
        if len(nonce) != NONCE_BYTES or len(tag) != TAG_BYTES:
            logger.error("Summary envelope has a bad nonce or tag length")
            raise DecryptionError("summary envelope is corrupt")

        try:
            plaintext = self._aead.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as exc:
            logger.error("Summary envelope failed authentication")
            raise DecryptionError("summary authentication failed") from exc
        return plaintext.decode("utf-8")
