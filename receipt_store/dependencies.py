"""
FastAPI dependency providers for the pipeline components.

Each component is built once from :data:`receipt_store.config.settings`;
tests replace them through ``app.dependency_overrides``.
"""
from functools import lru_cache

from receipt_store.config import settings
from receipt_store.pipeline.extractor import TextExtractor
from receipt_store.pipeline.summarizer import GeminiSummarizer
from receipt_store.pipeline.vault import CryptoVault
from receipt_store.storage import BlobStore


@lru_cache
def get_vault() -> CryptoVault:
    return CryptoVault.from_settings(settings)


@lru_cache
def get_summarizer() -> GeminiSummarizer:
    return GeminiSummarizer.from_settings(settings)


@lru_cache
def get_extractor() -> TextExtractor:
    return TextExtractor.from_settings(settings)


@lru_cache
def get_blob_store() -> BlobStore:
    return BlobStore.from_settings(settings)
