# This file implements the document stores that hold the single persisted pricing matrix.
# It exists so the API can keep the matrix in a JSON file or a SQL table behind one small interface.
# There is exactly one document per deployment, so neither store takes an identifier.
# Storage failures are wrapped in DocumentStoreError so the service layer handles one exception type.

from __future__ import annotations

import json
import os
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from pricing_matrix.api.api_config import ApiConfig

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_DOCUMENT_KEY = "pricing_matrix"


class DocumentStoreError(RuntimeError):
    """Raised when the matrix document cannot be read or written."""


class DocumentStore(Protocol):
    def can_connect(self) -> bool: ...

    def read(self) -> dict[str, Any] | None: ...

    def write(self, document: dict[str, Any]) -> dict[str, Any]: ...


def _safe_identifier(identifier: str) -> str:
    if not _IDENTIFIER_RE.match(identifier):
        raise ValueError(f"Unsafe SQL identifier: {identifier!r}")
    return identifier


def _decode(raw: str, *, source: str) -> dict[str, Any]:
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DocumentStoreError(f"Stored matrix in {source} is not valid JSON") from exc
    if not isinstance(document, dict):
        raise DocumentStoreError(f"Stored matrix in {source} is not a JSON object")
    return document


class JsonFileDocumentStore:
    """Keeps the matrix as one JSON file, replaced atomically on every write."""

    def __init__(self, *, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def can_connect(self) -> bool:
        directory = self._path.parent
        while not directory.exists():
            if directory.parent == directory:
                return False
            directory = directory.parent
        return os.access(directory, os.W_OK)

    def read(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DocumentStoreError(f"Could not read {self._path}") from exc
        return _decode(raw, source=str(self._path))

    def write(self, document: dict[str, Any]) -> dict[str, Any]:
        encoded = json.dumps(document, indent=2)
        temp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(encoded, encoding="utf-8")
            os.replace(temp_path, self._path)
        except OSError as exc:
            raise DocumentStoreError(f"Could not write {self._path}") from exc
        return _decode(encoded, source=str(self._path))


class SqlDocumentStore:
    """Keeps the matrix as one JSON row in a key/value table."""

    def __init__(self, *, database_url: str, table_name: str) -> None:
        self._engine: Engine = create_engine(database_url, pool_pre_ping=True, future=True)
        self._table = _safe_identifier(table_name)
        self._table_ready = False

    def can_connect(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def read(self) -> dict[str, Any] | None:
        query = text(f"SELECT payload FROM {self._table} WHERE doc_key = :doc_key")
        try:
            self._ensure_table()
            with self._engine.connect() as connection:
                raw = connection.execute(query, {"doc_key": _DOCUMENT_KEY}).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Could not read matrix from {self._table}") from exc
        if raw is None:
            return None
        return _decode(str(raw), source=self._table)

    def write(self, document: dict[str, Any]) -> dict[str, Any]:
        encoded = json.dumps(document)
        params = {
            "doc_key": _DOCUMENT_KEY,
            "payload": encoded,
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        try:
            self._ensure_table()
            with self._engine.begin() as connection:
                connection.execute(
                    text(f"DELETE FROM {self._table} WHERE doc_key = :doc_key"),
                    {"doc_key": _DOCUMENT_KEY},
                )
                connection.execute(
                    text(
                        f"INSERT INTO {self._table} (doc_key, payload, updated_at) "
                        "VALUES (:doc_key, :payload, :updated_at)"
                    ),
                    params,
                )
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Could not write matrix to {self._table}") from exc
        return _decode(encoded, source=self._table)

    def _ensure_table(self) -> None:
        if self._table_ready:
            return
        ddl = f"""
        CREATE TABLE IF NOT EXISTS {self._table} (
            doc_key VARCHAR(64) PRIMARY KEY,
            payload TEXT NOT NULL,
            updated_at VARCHAR(40) NOT NULL
        )
        """
        with self._engine.begin() as connection:
            connection.execute(text(ddl))
        self._table_ready = True


def build_document_store(config: ApiConfig) -> DocumentStore:
    if config.store_backend == "sql":
        return SqlDocumentStore(
            database_url=config.database_url,
            table_name=config.matrix_table_name,
        )
    return JsonFileDocumentStore(path=config.store_path)
