# This file defines the request and response contracts of the pricing matrix endpoints.
# A matrix is a non-empty mapping of package price rows to exactly three tier prices.
# Prices are validated as finite, non-negative numbers; numeric strings are coerced to floats.
# The response envelope returns the document as stored, so clients can adopt it as their new baseline.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from pricing_matrix.api.schemas.common import EnvelopeFields


class TierPrices(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lite: float = Field(ge=0, allow_inf_nan=False)
    standard: float = Field(ge=0, allow_inf_nan=False)
    unlimited: float = Field(ge=0, allow_inf_nan=False)


class PricingMatrixPayload(RootModel[dict[str, TierPrices]]):
    @field_validator("root")
    @classmethod
    def validate_rows(cls, value: dict[str, TierPrices]) -> dict[str, TierPrices]:
        if not value:
            raise ValueError("Pricing matrix must contain at least one row.")
        blank = [row for row in value if not row.strip()]
        if blank:
            raise ValueError("Pricing matrix row names must not be blank.")
        return value

    def to_document(self) -> dict[str, dict[str, float]]:
        return {row: prices.model_dump() for row, prices in self.root.items()}


class PricingMatrixResponseV1(EnvelopeFields):
    data: dict[str, TierPrices]
