# This test file validates the edit session lifecycle against a fake persistence backend.
# It covers load, edit/cancel, clear, typing and blur commits, save success, overlap, and failure, and listener updates.
# Async operations are driven with asyncio.run so the tests stay plain pytest functions.

from __future__ import annotations

import asyncio
import copy

import pytest

from pricing_matrix.matrix.backend import (
    ApiPayloadError,
    ApiRejectedError,
    ApiUnavailableError,
    MatrixBackendError,
)
from pricing_matrix.matrix.session import EditSessionController, SessionView
from pricing_matrix.matrix.types import Matrix
from pricing_matrix.matrix.validation import EDIT_MODE_HINT, INVALID_INPUT_NOTE, SAVE_FAILED_NOTE

BASIC_MATRIX: Matrix = {"basic": {"lite": 10, "standard": 20, "unlimited": 30}}


class _FakeBackend:
    def __init__(
        self,
        *,
        stored: Matrix | None = None,
        load_error: Exception | None = None,
        save_error: Exception | None = None,
        save_response: Matrix | None = None,
    ) -> None:
        self.stored = copy.deepcopy(stored) if stored is not None else {}
        self.load_error = load_error
        self.save_error = save_error
        self.save_response = save_response
        self.load_calls = 0
        self.saved: list[Matrix] = []
        self.release_save: asyncio.Event | None = None

    async def load_matrix(self) -> Matrix:
        self.load_calls += 1
        if self.load_error is not None:
            raise self.load_error
        return copy.deepcopy(self.stored)

    async def save_matrix(self, matrix: Matrix) -> Matrix:
        self.saved.append(copy.deepcopy(matrix))
        if self.release_save is not None:
            await self.release_save.wait()
        if self.save_error is not None:
            raise self.save_error
        if self.save_response is not None:
            return copy.deepcopy(self.save_response)
        return copy.deepcopy(matrix)


def _loaded_session(backend: _FakeBackend | None = None) -> EditSessionController:
    session = EditSessionController(backend=backend or _FakeBackend(stored=BASIC_MATRIX))
    asyncio.run(session.initialize())
    return session


def test_initialize_loads_original_and_working() -> None:
    session = _loaded_session()

    assert session.matrix_state.original == BASIC_MATRIX
    assert session.matrix_state.working == BASIC_MATRIX
    assert session.state.edit_mode is False
    assert session.state.error_note == ""


def test_initialize_runs_once() -> None:
    backend = _FakeBackend(stored=BASIC_MATRIX)
    session = _loaded_session(backend)

    asyncio.run(session.initialize())

    assert backend.load_calls == 1


@pytest.mark.parametrize(
    "error",
    [ApiUnavailableError("down"), ApiPayloadError("not json")],
)
def test_failed_load_leaves_empty_table_without_error_note(
    error: MatrixBackendError, caplog: pytest.LogCaptureFixture
) -> None:
    session = _loaded_session(_FakeBackend(load_error=error))

    assert session.matrix_state.original == {}
    assert session.matrix_state.working == {}
    assert session.state.error_note == ""
    assert "could not be loaded" in caplog.text


def test_enter_edit_mode_keeps_working_copy() -> None:
    session = _loaded_session()

    session.edit_toggle()

    assert session.state.edit_mode is True
    assert session.state.is_changed is False
    assert session.matrix_state.working == BASIC_MATRIX
    assert session.cells_editable is True


def test_typing_lite_derives_standard_and_unlimited() -> None:
    session = _loaded_session()
    session.edit_toggle()

    accepted = session.set_typing("basic", "lite", "5")

    assert accepted is True
    assert session.matrix_state.working == {"basic": {"lite": "5", "standard": 10, "unlimited": 15}}
    assert session.state.is_changed is True
    assert session.state.error_note == ""


def test_blur_settles_lite_to_a_number() -> None:
    session = _loaded_session()
    session.edit_toggle()
    session.set_typing("basic", "lite", "5")

    session.finalize_cell("basic", "lite", "5")

    lite = session.matrix_state.working["basic"]["lite"]
    assert lite == 5
    assert isinstance(lite, float)


@pytest.mark.parametrize("lite", ["0", "1.5", "12.", "100"])
def test_lite_derivation_overrides_prior_values(lite: str) -> None:
    session = _loaded_session()
    session.edit_toggle()
    session.set_typing("basic", "standard", "999")

    session.set_typing("basic", "lite", lite)

    row = session.matrix_state.working["basic"]
    assert row["standard"] == float(lite) * 2
    assert row["unlimited"] == float(lite) * 3


def test_editing_standard_does_not_touch_other_tiers() -> None:
    session = _loaded_session()
    session.edit_toggle()

    session.set_typing("basic", "standard", "7.5")

    assert session.matrix_state.working == {"basic": {"lite": 10, "standard": "7.5", "unlimited": 30}}


def test_empty_input_is_stored_as_zero() -> None:
    session = _loaded_session()
    session.edit_toggle()

    session.set_typing("basic", "unlimited", "")
    assert session.matrix_state.working["basic"]["unlimited"] == "0"

    session.finalize_cell("basic", "unlimited", "")
    assert session.matrix_state.working["basic"]["unlimited"] == 0.0


def test_invalid_input_sets_note_and_changes_nothing() -> None:
    session = _loaded_session()
    session.edit_toggle()
    revision = session.matrix_state.revision

    accepted = session.set_typing("basic", "lite", "12.5.3")

    assert accepted is False
    assert session.state.error_note == INVALID_INPUT_NOTE
    assert session.matrix_state.working == BASIC_MATRIX
    assert session.matrix_state.revision == revision
    assert session.state.is_changed is False


def test_valid_input_clears_previous_error_note() -> None:
    session = _loaded_session()
    session.edit_toggle()
    session.set_typing("basic", "lite", "abc")

    session.set_typing("basic", "lite", "3")

    assert session.state.error_note == ""


def test_cancel_restores_original_and_clears_dirty_flag() -> None:
    session = _loaded_session()
    session.edit_toggle()
    session.set_typing("basic", "lite", "5")

    session.edit_toggle()

    assert session.state.edit_mode is False
    assert session.state.is_changed is False
    assert session.matrix_state.working == session.matrix_state.original == BASIC_MATRIX


def test_clear_zeroes_working_and_keeps_original() -> None:
    session = _loaded_session()
    session.edit_toggle()

    session.clear()

    assert session.matrix_state.working == {"basic": {"lite": 0, "standard": 0, "unlimited": 0}}
    assert session.matrix_state.original == BASIC_MATRIX
    assert session.state.is_changed is True
    assert session.state.edit_mode is True


def test_clear_outside_edit_mode_is_ignored() -> None:
    session = _loaded_session()

    session.clear()

    assert session.matrix_state.working == BASIC_MATRIX
    assert session.state.is_changed is False


def test_enablement_rules_follow_session_flags() -> None:
    session = _loaded_session()
    assert (session.can_save, session.can_clear, session.cells_editable) == (False, False, False)

    session.edit_toggle()
    assert (session.can_save, session.can_clear, session.cells_editable) == (False, True, True)

    session.set_typing("basic", "lite", "4")
    assert (session.can_save, session.can_clear, session.cells_editable) == (True, True, True)


def test_save_adopts_server_response_as_baseline() -> None:
    backend = _FakeBackend(stored={"basic": {"lite": 5, "standard": 10, "unlimited": 15}})
    session = _loaded_session(backend)
    session.edit_toggle()
    session.finalize_cell("basic", "standard", "10")

    saved = asyncio.run(session.save())

    expected = {"basic": {"lite": 5, "standard": 10, "unlimited": 15}}
    assert saved is True
    assert session.matrix_state.original == expected
    assert session.matrix_state.working == expected
    assert session.state.edit_mode is False
    assert session.state.is_changed is False
    assert session.state.is_saving is False


def test_save_sends_working_copy_and_uses_normalized_response() -> None:
    normalized = {"basic": {"lite": 6.0, "standard": 12.0, "unlimited": 18.0}}
    backend = _FakeBackend(stored=BASIC_MATRIX, save_response=normalized)
    session = _loaded_session(backend)
    session.edit_toggle()
    session.set_typing("basic", "lite", "6")

    asyncio.run(session.save())

    assert backend.saved == [{"basic": {"lite": "6", "standard": 12.0, "unlimited": 18.0}}]
    assert session.matrix_state.working == normalized
    assert session.matrix_state.original == normalized


def test_second_save_while_saving_is_dropped() -> None:
    backend = _FakeBackend(stored=BASIC_MATRIX)
    session = _loaded_session(backend)
    session.edit_toggle()
    session.set_typing("basic", "lite", "2")

    async def scenario() -> tuple[bool, bool]:
        backend.release_save = asyncio.Event()
        first = asyncio.create_task(session.save())
        await asyncio.sleep(0)
        state_while_saving = session.state
        second = await session.save()
        assert session.state == state_while_saving
        backend.release_save.set()
        return await first, second

    first_result, second_result = asyncio.run(scenario())

    assert first_result is True
    assert second_result is False
    assert len(backend.saved) == 1


def test_edit_toggle_during_save_does_not_allow_a_second_save() -> None:
    backend = _FakeBackend(stored=BASIC_MATRIX)
    session = _loaded_session(backend)
    session.edit_toggle()
    session.set_typing("basic", "lite", "2")

    async def scenario() -> tuple[bool, bool]:
        backend.release_save = asyncio.Event()
        first = asyncio.create_task(session.save())
        await asyncio.sleep(0)
        session.edit_toggle()
        session.set_typing("basic", "lite", "3")
        assert session.state.is_saving is True
        assert session.state.edit_mode is False
        assert session.can_save is False
        second = await session.save()
        backend.release_save.set()
        return await first, second

    first_result, second_result = asyncio.run(scenario())

    assert first_result is True
    assert second_result is False
    assert len(backend.saved) == 1
    assert backend.saved[0]["basic"]["lite"] == "2"


def test_cancelled_save_unlocks_the_session() -> None:
    backend = _FakeBackend(stored=BASIC_MATRIX)
    session = _loaded_session(backend)
    session.edit_toggle()
    session.set_typing("basic", "lite", "2")

    async def scenario() -> None:
        backend.release_save = asyncio.Event()
        task = asyncio.create_task(session.save())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert session.state.is_saving is False
    assert session.state.edit_mode is True
    assert session.state.is_changed is True
    assert session.can_save is True


def test_session_flags_while_save_is_in_flight() -> None:
    backend = _FakeBackend(stored=BASIC_MATRIX)
    session = _loaded_session(backend)
    session.edit_toggle()
    session.set_typing("basic", "lite", "2")

    async def scenario() -> SessionView:
        backend.release_save = asyncio.Event()
        task = asyncio.create_task(session.save())
        await asyncio.sleep(0)
        view = session.view()
        backend.release_save.set()
        await task
        return view

    view = asyncio.run(scenario())

    assert view.is_saving is True
    assert view.edit_mode is False
    assert view.is_changed is False
    assert view.can_save is False
    assert view.can_clear is False
    assert view.cells_editable is False
    assert view.working["basic"]["lite"] == "2"


@pytest.mark.parametrize(
    "error",
    [ApiUnavailableError("down"), ApiRejectedError("422"), ApiPayloadError("garbage")],
)
def test_failed_save_keeps_edits_and_allows_retry(error: MatrixBackendError) -> None:
    backend = _FakeBackend(stored=BASIC_MATRIX, save_error=error)
    session = _loaded_session(backend)
    session.edit_toggle()
    session.set_typing("basic", "lite", "7")

    saved = asyncio.run(session.save())

    assert saved is False
    assert session.state.error_note == SAVE_FAILED_NOTE
    assert session.state.is_saving is False
    assert session.state.edit_mode is True
    assert session.state.is_changed is True
    assert session.matrix_state.working == {"basic": {"lite": "7", "standard": 14, "unlimited": 21}}
    assert session.matrix_state.original == BASIC_MATRIX

    backend.save_error = None
    assert asyncio.run(session.save()) is True
    assert session.state.error_note == ""
    assert session.matrix_state.original == {"basic": {"lite": "7", "standard": 14, "unlimited": 21}}


def test_view_and_listeners_reflect_changes() -> None:
    session = _loaded_session()
    views: list[SessionView] = []
    session.subscribe(views.append)

    session.edit_toggle()
    session.set_typing("basic", "lite", "1")

    assert views[0].edit_mode is True
    assert views[0].hint_note == EDIT_MODE_HINT
    assert views[-1].working["basic"] == {"lite": "1", "standard": 2, "unlimited": 3}
    assert session.view().hint_note == EDIT_MODE_HINT


def test_connection_error_on_save_is_reported_and_retryable(caplog: pytest.LogCaptureFixture) -> None:
    backend = _FakeBackend(stored=BASIC_MATRIX, save_error=ConnectionResetError("connection reset"))
    session = _loaded_session(backend)
    session.edit_toggle()
    session.set_typing("basic", "lite", "7")

    saved = asyncio.run(session.save())

    assert saved is False
    assert session.state.error_note == SAVE_FAILED_NOTE
    assert session.state.is_saving is False
    assert session.state.edit_mode is True
    assert session.state.is_changed is True
    assert session.can_save is True
    assert "Saving the pricing matrix failed" in caplog.text


def test_connection_error_on_load_leaves_empty_table() -> None:
    session = _loaded_session(_FakeBackend(load_error=OSError("network unreachable")))

    assert session.matrix_state.original == {}
    assert session.matrix_state.working == {}
    assert session.state.error_note == ""


def test_each_cell_edit_reaches_listeners_once() -> None:
    session = _loaded_session()
    session.edit_toggle()
    views: list[SessionView] = []
    session.subscribe(views.append)

    session.set_typing("basic", "lite", "4")

    assert len(views) == 1
    assert views[0].is_changed is True
    assert views[0].can_save is True
    assert views[0].working["basic"] == {"lite": "4", "standard": 8, "unlimited": 12}


def test_clear_reaches_listeners_once() -> None:
    session = _loaded_session()
    session.edit_toggle()
    views: list[SessionView] = []
    session.subscribe(views.append)

    session.clear()

    assert len(views) == 1
    assert views[0].is_changed is True
    assert views[0].working["basic"] == {"lite": 0, "standard": 0, "unlimited": 0}
