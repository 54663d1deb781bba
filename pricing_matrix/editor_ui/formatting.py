# This file collects the formatting helpers used by the editor page.
# Draft strings are shown exactly as typed; settled numbers drop a trailing ".0".

from __future__ import annotations

from collections.abc import Mapping

import pandas as pd

from pricing_matrix.matrix.types import TIERS, CellValue


def format_cell(value: CellValue) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def matrix_frame(matrix: Mapping[str, Mapping[str, CellValue]], *, package_column: str) -> pd.DataFrame:
    """Tabulate a matrix with one row per package and the tiers in their usual order."""

    if not matrix:
        return pd.DataFrame(columns=[package_column, *TIERS])
    frame = pd.DataFrame.from_dict({row: dict(tiers) for row, tiers in matrix.items()}, orient="index")
    ordered = [tier for tier in TIERS if tier in frame.columns]
    extra = [column for column in frame.columns if column not in TIERS]
    frame = frame[ordered + extra]
    frame.index.name = package_column
    return frame.reset_index()
