# This module defines the persistence contract the edit session awaits on.
# A backend loads the single stored matrix and saves a full working matrix, returning what was stored.
# Failures are reported through one small exception family so the controller can catch them at its boundary.
# The adapter at the bottom runs the blocking HTTP client in a worker thread for the event loop.

from __future__ import annotations

import asyncio
from typing import Protocol

from pricing_matrix.matrix.types import Matrix


class MatrixBackendError(RuntimeError):
    """Base class for load/save failures of the matrix persistence backend."""


class ApiUnavailableError(MatrixBackendError):
    """Raised when the API cannot be reached or responds with server errors."""


class ApiRejectedError(MatrixBackendError):
    """Raised when the API rejects the request, for example an invalid matrix shape or value."""


class ApiPayloadError(MatrixBackendError):
    """Raised when the API response body is not valid JSON or does not hold a matrix."""


class MatrixBackend(Protocol):
    async def load_matrix(self) -> Matrix: ...

    async def save_matrix(self, matrix: Matrix) -> Matrix: ...


class SyncMatrixClient(Protocol):
    def load_matrix(self) -> Matrix: ...

    def save_matrix(self, matrix: Matrix) -> Matrix: ...


class ApiMatrixBackend:
    """Async facade over a blocking matrix client."""

    def __init__(self, client: SyncMatrixClient) -> None:
        self._client = client

    async def load_matrix(self) -> Matrix:
        return await asyncio.to_thread(self._client.load_matrix)

    async def save_matrix(self, matrix: Matrix) -> Matrix:
        return await asyncio.to_thread(self._client.save_matrix, matrix)
