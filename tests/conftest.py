# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for entity discovery tests."""

import io
import json
import os

import pytest

# Set test environment variables before importing the package
os.environ.setdefault("DISABLE_LOGGING", "1")

from loguru import logger  # noqa: E402

# Keep stderr quiet; CLI tests read stdout
logger.remove()


class FakeLookup:
    """In-memory stand-in for the OpenSearch lookup client."""

    def __init__(self, existing: dict | None = None, fail_on: str | None = None):
        self.existing = existing or {}
        self.fail_on = fail_on
        self.queries: list[str] = []

    def find_entity(self, entity_id: str):
        from entity_discovery.connectors import LookupServiceError

        self.queries.append(entity_id)
        if entity_id == self.fail_on:
            raise LookupServiceError(f"lookup failed for {entity_id}", status_code=500)
        return self.existing.get(entity_id)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass


class ChunkedStream:
    """Binary stream handing out one pre-split chunk per read."""

    def __init__(self, chunks):
        self.chunks = list(chunks)

    def read(self, size=-1):
        if size == 0 or not self.chunks:
            return b""
        return self.chunks.pop(0)


@pytest.fixture
def chunked_stream():
    return ChunkedStream


@pytest.fixture
def fake_lookup():
    """Lookup client that finds nothing."""
    return FakeLookup()


@pytest.fixture
def lookup_factory():
    """Build lookup clients with preset existing ids or a failing id."""
    return FakeLookup


@pytest.fixture
def make_stream():
    """Turn a Python value (or raw text) into a binary input stream."""

    def _make(value) -> io.BytesIO:
        if isinstance(value, (bytes, str)):
            data = value.encode("utf-8") if isinstance(value, str) else value
        else:
            data = json.dumps(value).encode("utf-8")
        return io.BytesIO(data)

    return _make


@pytest.fixture
def sample_supplier() -> dict:
    """Sample supplier subdocument for testing."""
    return {
        "name": "Gomez,Perez,,Juan,Carlos",
        "identifier": {"id": "900123456"},
        "details": {"legalEntityTypeDetail": {"description": "INDIVIDUAL"}},
        "address": {
            "region": "Antioquia",
            "locality": "Medellín",
            "streetAddress": "Calle 10 # 43-12",
        },
        "contactPoint": {"telephone": "6045550000"},
    }


@pytest.fixture
def sample_documents(sample_supplier: dict) -> list:
    """Contract documents, with a repeated supplier id."""
    return [
        {"ocid": "c-1", "supplier": sample_supplier},
        {"ocid": "c-2", "supplier": {"name": "Acme SAS", "identifier": {"id": "800999111"}}},
        {"ocid": "c-3", "supplier": {**sample_supplier, "name": "Otro Nombre"}},
        {"ocid": "c-4"},
    ]
