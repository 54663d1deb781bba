# This module holds the two matrix snapshots of an edit session: the saved baseline and the working copy.
# State changes only through dispatched actions, and each dispatch swaps in one new immutable state.
# Renderers read with get_state() or subscribe(); nothing outside the store mutates either matrix.
# The reducer is a pure function so transitions can be tested without a store instance.

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Union

from pricing_matrix.matrix.types import (
    LITE_TIER,
    STANDARD_MULTIPLIER,
    STANDARD_TIER,
    UNLIMITED_MULTIPLIER,
    UNLIMITED_TIER,
    CellValue,
    Matrix,
    copy_matrix,
    parse_cell_number,
    zeroed_matrix,
)


@dataclass(frozen=True)
class ReplaceOriginal:
    """Adopt a loaded or saved matrix as the new baseline; the working copy is left alone."""

    payload: Matrix


@dataclass(frozen=True)
class ResetWorking:
    """Rebuild the working copy from the baseline, or zero every cell when ``reset_to_empty``."""

    reset_to_empty: bool = False


@dataclass(frozen=True)
class SetCell:
    row: str
    column: str
    value: CellValue


@dataclass(frozen=True)
class SetRowFromLite:
    """Write a lite price and its derived standard/unlimited prices in one transition."""

    row: str
    value: CellValue


MatrixAction = Union[ReplaceOriginal, ResetWorking, SetCell, SetRowFromLite]


@dataclass(frozen=True)
class MatrixState:
    original: Matrix = field(default_factory=dict)
    working: Matrix = field(default_factory=dict)
    revision: int = 0


StateListener = Callable[[MatrixState], None]


def _with_working(state: MatrixState, working: Matrix) -> MatrixState:
    return MatrixState(original=state.original, working=working, revision=state.revision + 1)


def reduce(state: MatrixState, action: MatrixAction) -> MatrixState:
    """Return the state that results from applying ``action`` to ``state``."""

    if isinstance(action, ReplaceOriginal):
        return MatrixState(
            original=copy_matrix(action.payload),
            working=state.working,
            revision=state.revision + 1,
        )

    if isinstance(action, ResetWorking):
        if action.reset_to_empty:
            return _with_working(state, zeroed_matrix(state.working))
        return _with_working(state, copy_matrix(state.original))

    if isinstance(action, SetCell):
        row = state.working.get(action.row)
        if row is None or action.column not in row:
            return state
        working = copy_matrix(state.working)
        working[action.row][action.column] = action.value
        return _with_working(state, working)

    if isinstance(action, SetRowFromLite):
        row = state.working.get(action.row)
        if row is None or LITE_TIER not in row:
            return state
        lite_number = parse_cell_number(action.value)
        derived = {
            LITE_TIER: action.value,
            STANDARD_TIER: lite_number * STANDARD_MULTIPLIER,
            UNLIMITED_TIER: lite_number * UNLIMITED_MULTIPLIER,
        }
        working = copy_matrix(state.working)
        for tier, value in derived.items():
            if tier in working[action.row]:
                working[action.row][tier] = value
        return _with_working(state, working)

    raise TypeError(f"Unsupported matrix action: {action!r}")


class MatrixStore:
    """Owns the matrix state of one edit session."""

    def __init__(self, *, initial_state: MatrixState | None = None) -> None:
        self._state = initial_state or MatrixState()
        self._listeners: list[StateListener] = []

    def get_state(self) -> MatrixState:
        return self._state

    def dispatch(self, action: MatrixAction) -> None:
        next_state = reduce(self._state, action)
        if next_state is self._state:
            return
        self._state = next_state
        for listener in list(self._listeners):
            listener(next_state)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
