# This file provides shared helpers for API endpoint tests.
# It exists so tests can swap the document store without touching real files or databases.
# The helpers build consistent config objects and scoped TestClient contexts.

from __future__ import annotations

import copy
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi.testclient import TestClient

from pricing_matrix.api.api_config import ApiConfig
from pricing_matrix.api.app import app
from pricing_matrix.api.dependencies import get_config, get_matrix_service
from pricing_matrix.api.document_store import DocumentStoreError
from pricing_matrix.api.services.matrix_service import MatrixService


def build_test_config(*, store_backend: str = "file") -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Pricing Matrix API",
        api_version_path="/api/v1",
        schema_version="1.0.0",
        host="0.0.0.0",
        port=8000,
        environment="test",
        store_backend=store_backend,
        store_path="unused/pricing.json",
        database_url="sqlite://",
        matrix_table_name="pricing_matrix_document",
        allowed_origins=[],
        app_version="0.1.0",
    )


class InMemoryDocumentStore:
    """Document store double that keeps the matrix in memory."""

    def __init__(
        self,
        *,
        document: dict[str, Any] | None = None,
        connected: bool = True,
        fail_reads: bool = False,
        fail_writes: bool = False,
    ) -> None:
        self.document = copy.deepcopy(document)
        self.connected = connected
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes: list[dict[str, Any]] = []

    def can_connect(self) -> bool:
        return self.connected

    def read(self) -> dict[str, Any] | None:
        if self.fail_reads:
            raise DocumentStoreError("read failed")
        return copy.deepcopy(self.document)

    def write(self, document: dict[str, Any]) -> dict[str, Any]:
        if self.fail_writes:
            raise DocumentStoreError("write failed")
        self.writes.append(copy.deepcopy(document))
        self.document = copy.deepcopy(document)
        return copy.deepcopy(document)


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    store: InMemoryDocumentStore | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()
    resolved_store = store or InMemoryDocumentStore()
    service = MatrixService(config=resolved_config, store=resolved_store)

    app.dependency_overrides[get_config] = lambda: resolved_config
    app.dependency_overrides[get_matrix_service] = lambda: service

    try:
        with TestClient(app, raise_server_exceptions=False) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
