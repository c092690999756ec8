"""
Shared pytest fixtures — in‑memory SQLite, a scripted Gemini endpoint and a
FastAPI TestClient with the pipeline components swapped for test doubles.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from receipt_store.database import Base, get_db
from receipt_store.dependencies import get_blob_store, get_extractor, get_summarizer, get_vault
from receipt_store.main import app
from receipt_store.models import ReceiptModel  # noqa: F401  — register model
from receipt_store.pipeline.summarizer import GeminiSummarizer
from receipt_store.pipeline.vault import CryptoVault

GEMINI_URL = "https://gemini.test/v1/models/gemini-1.5-flash:generateContent"

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)


class FakeOracle:
    """Scripted stand-in for the Gemini HTTP endpoint."""

    def __init__(self):
        self.reply = {"candidates": [{"content": {"parts": [{"text": "Default summary"}]}}]}
        self.status_code = 200
        self.error = None
        self.requests = []

    def say(self, text):
        self.reply = {"candidates": [{"content": {"parts": [{"text": text}]}}]}

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.reply)

    @property
    def last_prompt(self):
        body = json.loads(self.requests[-1].content)
        return body["contents"][0]["parts"][0]["text"]


class FakeExtractor:
    def __init__(self, text=""):
        self.text = text
        self.calls = []

    def extract_text(self, url):
        self.calls.append(url)
        return self.text


class FakeBlobStore:
    def __init__(self):
        self.uploads = []
        self.error = None

    def upload(self, data, filename=None):
        if self.error is not None:
            raise self.error
        self.uploads.append((data, filename))
        return {
            "secure_url": f"https://res.cloudinary.test/medassist/receipts/{filename}",
            "public_id": f"medassist/receipts/{filename.rsplit('.', 1)[0]}",
            "resource_type": "image",
        }


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def vault():
    return CryptoVault("test-secret")


@pytest.fixture()
def oracle():
    return FakeOracle()


@pytest.fixture()
def extractor():
    return FakeExtractor()


@pytest.fixture()
def blob_store():
    return FakeBlobStore()


@pytest.fixture()
def client(db, vault, oracle, extractor, blob_store):
    def _override():
        try:
            yield db
        finally:
            pass

    summarizer = GeminiSummarizer(
        api_key="test-key",
        endpoint=GEMINI_URL,
        transport=httpx.MockTransport(oracle.handle),
    )
    app.dependency_overrides[get_db] = _override
    app.dependency_overrides[get_vault] = lambda: vault
    app.dependency_overrides[get_summarizer] = lambda: summarizer
    app.dependency_overrides[get_extractor] = lambda: extractor
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
