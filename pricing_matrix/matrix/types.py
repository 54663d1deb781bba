# This module defines the pricing matrix shape and the small helpers every layer shares.
# A matrix maps a package price row to its tier prices; rows and tiers are fixed for a session.
# Cells hold the raw validated string while typed and a float once the field is finalized.
# The copy helpers always build new inner dicts so working edits never alias the baseline.

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final, TypeAlias, Union

CellValue: TypeAlias = Union[float, int, str]
Matrix: TypeAlias = dict[str, dict[str, CellValue]]

LITE_TIER: Final[str] = "lite"
STANDARD_TIER: Final[str] = "standard"
UNLIMITED_TIER: Final[str] = "unlimited"
TIERS: Final[tuple[str, ...]] = (LITE_TIER, STANDARD_TIER, UNLIMITED_TIER)

STANDARD_MULTIPLIER: Final[int] = 2
UNLIMITED_MULTIPLIER: Final[int] = 3

_HAS_DIGIT_RE = re.compile(r"[0-9]")


def parse_cell_number(value: CellValue) -> float:
    """Parse a validated cell value; strings without any digit (``""``, ``"."``) read as zero."""

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    text = str(value).strip()
    if not _HAS_DIGIT_RE.search(text):
        return 0.0
    return float(text)


def copy_matrix(matrix: Mapping[str, Mapping[str, CellValue]]) -> Matrix:
    return {row: dict(tiers) for row, tiers in matrix.items()}


def zeroed_matrix(matrix: Mapping[str, Mapping[str, CellValue]]) -> Matrix:
    return {row: {tier: 0 for tier in tiers} for row, tiers in matrix.items()}


def numeric_matrix(matrix: Mapping[str, Mapping[str, CellValue]]) -> dict[str, dict[str, float]]:
    """Return a copy with every cell settled to its float form, as sent to the store."""

    return {
        row: {tier: parse_cell_number(value) for tier, value in tiers.items()}
        for row, tiers in matrix.items()
    }


def same_shape(
    left: Mapping[str, Mapping[str, CellValue]],
    right: Mapping[str, Mapping[str, CellValue]],
) -> bool:
    if set(left) != set(right):
        return False
    return all(set(left[row]) == set(right[row]) for row in left)
