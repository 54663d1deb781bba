# This module sequences operator intents (edit, cancel, clear, type, save) into matrix store actions.
# It owns the UI-visible session flags and the async load/save calls to the persistence backend.
# Backend and connection failures are caught here and turned into log lines or an error note.
# The enablement properties are the single source the page uses to enable buttons and inputs.

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from pricing_matrix.matrix.backend import MatrixBackend, MatrixBackendError
from pricing_matrix.matrix.store import (
    MatrixAction,
    MatrixState,
    MatrixStore,
    ReplaceOriginal,
    ResetWorking,
    SetCell,
    SetRowFromLite,
)
from pricing_matrix.matrix.types import (
    LITE_TIER,
    CellValue,
    Matrix,
    copy_matrix,
    parse_cell_number,
    same_shape,
)
from pricing_matrix.matrix.validation import (
    EDIT_MODE_HINT,
    INVALID_INPUT_NOTE,
    SAVE_FAILED_NOTE,
    is_valid_input,
)

LOGGER = logging.getLogger("matrix")


@dataclass(frozen=True)
class SessionState:
    edit_mode: bool = False
    is_saving: bool = False
    is_changed: bool = False
    error_note: str = ""


@dataclass(frozen=True)
class SessionView:
    """Everything a renderer needs for one frame of the editor."""

    edit_mode: bool
    is_saving: bool
    is_changed: bool
    error_note: str
    hint_note: str
    can_save: bool
    can_clear: bool
    cells_editable: bool
    original: Matrix
    working: Matrix
    revision: int


SessionListener = Callable[[SessionView], None]


class EditSessionController:
    def __init__(self, *, backend: MatrixBackend, store: MatrixStore | None = None) -> None:
        self._backend = backend
        self._store = store or MatrixStore()
        self._state = SessionState()
        self._initialized = False
        self._listeners: list[SessionListener] = []
        self._store.subscribe(lambda _: self._notify())

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def matrix_state(self) -> MatrixState:
        return self._store.get_state()

    @property
    def can_save(self) -> bool:
        return not self._state.is_saving and self._state.edit_mode and self._state.is_changed

    @property
    def can_clear(self) -> bool:
        return self._state.edit_mode and not self._state.is_saving

    @property
    def cells_editable(self) -> bool:
        return self._state.edit_mode

    def view(self) -> SessionView:
        matrix_state = self._store.get_state()
        return SessionView(
            edit_mode=self._state.edit_mode,
            is_saving=self._state.is_saving,
            is_changed=self._state.is_changed,
            error_note=self._state.error_note,
            hint_note=EDIT_MODE_HINT if self._state.edit_mode else "",
            can_save=self.can_save,
            can_clear=self.can_clear,
            cells_editable=self.cells_editable,
            original=copy_matrix(matrix_state.original),
            working=copy_matrix(matrix_state.working),
            revision=matrix_state.revision,
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def initialize(self) -> None:
        """Load the stored matrix once; a failed load leaves an empty table."""

        if self._initialized:
            return
        self._initialized = True
        try:
            data = await self._backend.load_matrix()
        except (MatrixBackendError, OSError):
            LOGGER.exception("Pricing matrix could not be loaded, showing an empty table")
            return
        self._refresh_matrix(data)
        LOGGER.info("Loaded pricing matrix with %d rows", len(data))

    def edit_toggle(self, *, disable_only: bool = False) -> None:
        """Enter edit mode, or leave it; leaving without ``disable_only`` discards unsaved edits.

        Ignored while a save is in flight, except for the save's own exit from edit mode.
        """

        if self._state.is_saving and not disable_only:
            return
        if not self._state.edit_mode:
            self._update(edit_mode=True, is_changed=False)
            return
        if disable_only:
            self._update(edit_mode=False)
            return
        self._dispatch_with(ResetWorking(reset_to_empty=False), edit_mode=False, is_changed=False)

    def clear(self) -> None:
        if not self.can_clear:
            return
        self._dispatch_with(ResetWorking(reset_to_empty=True), is_changed=True)

    def set_typing(self, row: str, column: str, raw_value: str, *, on_blur: bool = False) -> bool:
        """Validate and commit one cell edit; returns False when the input was rejected."""

        if not is_valid_input(raw_value):
            self._update(error_note=INVALID_INPUT_NOTE)
            return False

        value: CellValue = raw_value if raw_value != "" else "0"
        if on_blur:
            value = parse_cell_number(value)

        if column == LITE_TIER:
            action: MatrixAction = SetRowFromLite(row=row, value=value)
        else:
            action = SetCell(row=row, column=column, value=value)
        self._dispatch_with(action, error_note="", is_changed=True)
        return True

    def finalize_cell(self, row: str, column: str, raw_value: str) -> bool:
        return self.set_typing(row, column, raw_value, on_blur=True)

    async def save(self) -> bool:
        """Persist the working matrix; returns True when the backend accepted it."""

        if self._state.is_saving:
            return False

        before_save = self._state
        self._update(is_saving=True)
        if self._state.edit_mode:
            self.edit_toggle(disable_only=True)
        self._update(is_changed=False)

        working = copy_matrix(self._store.get_state().working)
        try:
            data = await self._backend.save_matrix(working)
        except (MatrixBackendError, OSError):
            LOGGER.exception("Saving the pricing matrix failed, keeping the working copy")
            self._abort_save(before_save, error_note=SAVE_FAILED_NOTE)
            return False
        except BaseException:
            # cancelled or unexpected: unlock the page before propagating
            self._abort_save(before_save, error_note=before_save.error_note)
            raise

        if not same_shape(data, working):
            LOGGER.warning("Saved pricing matrix came back with different rows or tiers")
        self._refresh_matrix(data)
        self._update(is_saving=False, error_note="")
        LOGGER.info("Saved pricing matrix with %d rows", len(data))
        return True

    def _abort_save(self, before_save: SessionState, *, error_note: str) -> None:
        self._update(
            is_saving=False,
            edit_mode=before_save.edit_mode,
            is_changed=before_save.is_changed,
            error_note=error_note,
        )

    def _refresh_matrix(self, data: Matrix) -> None:
        self._store.dispatch(ReplaceOriginal(payload=data))
        self._store.dispatch(ResetWorking(reset_to_empty=False))

    def _dispatch_with(self, action: MatrixAction, **changes: object) -> None:
        """Apply flag changes and a store action so listeners see one combined update."""

        previous = self._state
        self._state = replace(previous, **changes)
        revision = self._store.get_state().revision
        self._store.dispatch(action)
        if self._store.get_state().revision == revision and self._state != previous:
            self._notify()

    def _update(self, **changes: object) -> None:
        next_state = replace(self._state, **changes)
        if next_state == self._state:
            return
        self._state = next_state
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        view = self.view()
        for listener in list(self._listeners):
            listener(view)
