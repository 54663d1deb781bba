# This file provides dependency factories for FastAPI routes.
# It exists so the document store and service are created once and shared through dependency injection.
# Route tests override these factories instead of touching real files or databases.

from __future__ import annotations

from functools import lru_cache

from pricing_matrix.api.api_config import ApiConfig, get_api_config
from pricing_matrix.api.document_store import DocumentStore, build_document_store
from pricing_matrix.api.services.matrix_service import MatrixService


@lru_cache(maxsize=1)
def get_document_store() -> DocumentStore:
    return build_document_store(get_api_config())


@lru_cache(maxsize=1)
def get_matrix_service() -> MatrixService:
    config = get_api_config()
    return MatrixService(config=config, store=get_document_store())


def get_config() -> ApiConfig:
    return get_api_config()
