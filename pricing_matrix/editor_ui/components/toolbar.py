# This file renders the Save, Edit/Cancel, and Clear buttons of the editor.
# Enablement comes straight from the session view; the toggle is locked while a save is in flight.

from __future__ import annotations

import asyncio

import streamlit as st

from pricing_matrix.editor_ui.ui_text import CANCEL_LABEL, CLEAR_LABEL, EDIT_LABEL, SAVE_LABEL
from pricing_matrix.matrix.session import EditSessionController, SessionView


def _save(session: EditSessionController) -> None:
    asyncio.run(session.save())


def _toggle(session: EditSessionController) -> None:
    session.edit_toggle()


def render_toolbar(session: EditSessionController, view: SessionView) -> None:
    save_col, toggle_col, clear_col = st.columns(3)
    save_col.button(
        SAVE_LABEL,
        key="matrix-save",
        on_click=_save,
        args=(session,),
        disabled=not view.can_save,
        use_container_width=True,
    )
    toggle_col.button(
        CANCEL_LABEL if view.edit_mode else EDIT_LABEL,
        key="matrix-edit-toggle",
        on_click=_toggle,
        args=(session,),
        disabled=view.is_saving,
        use_container_width=True,
    )
    clear_col.button(
        CLEAR_LABEL,
        key="matrix-clear",
        on_click=session.clear,
        disabled=not view.can_clear,
        use_container_width=True,
    )
