# This file implements the HTTP client the editor uses to load and save the pricing matrix.
# It exists so the edit session never deals with URLs, status codes, or envelope parsing.
# Transport failures, rejections, and malformed bodies map to the backend error family the session catches.
# The client is blocking; ApiMatrixBackend runs it off the event loop.

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import requests

from pricing_matrix.matrix.backend import ApiPayloadError, ApiRejectedError, ApiUnavailableError
from pricing_matrix.matrix.types import CellValue, Matrix, numeric_matrix

MATRIX_PATH = "/pricing-matrix"


class MatrixApiClient:
    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int = 8,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def load_matrix(self) -> Matrix:
        payload = self._request_json("GET", MATRIX_PATH)
        return _matrix_from_envelope(payload, url=self._url(MATRIX_PATH))

    def save_matrix(self, matrix: Mapping[str, Mapping[str, CellValue]]) -> Matrix:
        try:
            body = numeric_matrix(matrix)
        except ValueError as exc:
            raise ApiRejectedError(f"Matrix holds a value that is not a number: {exc}") from exc
        payload = self._request_json("POST", MATRIX_PATH, json_body=body)
        return _matrix_from_envelope(payload, url=self._url(MATRIX_PATH))

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request_json(
        self, method: str, path: str, json_body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        url = self._url(path)
        try:
            response = self.session.request(
                method, url, json=json_body, timeout=self.timeout_seconds
            )
        except requests.RequestException as exc:
            raise ApiUnavailableError(f"API request failed for {url}: {exc}") from exc

        if response.status_code >= 500:
            raise ApiUnavailableError(
                f"API request failed with status {response.status_code} for {url}"
            )
        if response.status_code >= 400:
            raise ApiRejectedError(
                f"API request was rejected with status {response.status_code} "
                f"({_error_code(response)}) for {url}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiPayloadError(f"API did not return valid JSON for {url}") from exc

        if not isinstance(payload, dict):
            raise ApiPayloadError(f"Unexpected payload shape from {url}")
        return payload


def _error_code(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return "unknown"
    if isinstance(payload, dict):
        return str(payload.get("error_code", "unknown"))
    return "unknown"


def _matrix_from_envelope(payload: dict[str, Any], *, url: str) -> Matrix:
    data = payload.get("data")
    if not isinstance(data, dict):
        raise ApiPayloadError(f"Response from {url} carries no matrix")

    matrix: Matrix = {}
    for row, tiers in data.items():
        if not isinstance(tiers, dict):
            raise ApiPayloadError(f"Row {row!r} from {url} is not a tier mapping")
        for tier, value in tiers.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ApiPayloadError(f"Cell {row!r}/{tier!r} from {url} is not a number")
        matrix[str(row)] = {str(tier): value for tier, value in tiers.items()}
    return matrix
