# This file defines the pricing matrix endpoints under the versioned API path.
# GET returns the stored matrix; POST validates a full matrix, stores it, and returns what was stored.
# Validation failures are answered by the global RequestValidationError handler with a 422 body.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from pricing_matrix.api.api_config import ApiConfig
from pricing_matrix.api.dependencies import get_config, get_matrix_service
from pricing_matrix.api.response_envelope import build_object_envelope
from pricing_matrix.api.schemas.matrix_schemas import (
    PricingMatrixPayload,
    PricingMatrixResponseV1,
)
from pricing_matrix.api.services.matrix_service import MatrixService

router = APIRouter(prefix="/pricing-matrix", tags=["pricing-matrix"])
MatrixServiceDep = Annotated[MatrixService, Depends(get_matrix_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.get(
    "",
    response_model=PricingMatrixResponseV1,
    response_model_exclude_none=True,
)
def get_pricing_matrix(
    request: Request,
    service: MatrixServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=service.load(),
    )


@router.post(
    "",
    response_model=PricingMatrixResponseV1,
    response_model_exclude_none=True,
)
def save_pricing_matrix(
    request: Request,
    payload: PricingMatrixPayload,
    service: MatrixServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=service.save(payload),
    )
