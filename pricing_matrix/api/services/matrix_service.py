# This file implements the load and save operations behind the pricing matrix endpoints.
# It exists so routers stay thin and the document store can be swapped in tests.
# Saved documents are normalized to floats by the request schema before they are written.
# The stored document, not the request body, is what the caller gets back.

from __future__ import annotations

import logging
from typing import Any

from pricing_matrix.api.api_config import ApiConfig
from pricing_matrix.api.document_store import DocumentStore, DocumentStoreError
from pricing_matrix.api.error_handlers import APIError
from pricing_matrix.api.schemas.matrix_schemas import PricingMatrixPayload

LOGGER = logging.getLogger("api")


class MatrixService:
    """Reads and writes the single pricing matrix document."""

    def __init__(self, *, config: ApiConfig, store: DocumentStore) -> None:
        self.config = config
        self.store = store

    def load(self) -> dict[str, Any]:
        document = self.store.read()
        if document is None:
            raise APIError(
                status_code=404,
                error_code="MATRIX_NOT_FOUND",
                message="No pricing matrix has been saved yet.",
            )
        return document

    def save(self, payload: PricingMatrixPayload) -> dict[str, Any]:
        document = payload.to_document()
        try:
            stored = self.store.write(document)
        except DocumentStoreError as exc:
            LOGGER.error("Pricing matrix write failed: %s", exc)
            raise APIError(
                status_code=500,
                error_code="MATRIX_WRITE_FAILED",
                message="The pricing matrix could not be saved.",
            ) from exc
        LOGGER.info(
            "Saved pricing matrix rows=%d backend=%s", len(stored), self.config.store_backend
        )
        return stored

    def is_ready(self) -> bool:
        return self.store.can_connect()
