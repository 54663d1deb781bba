# This file renders the editable pricing matrix, one text input per cell.
# Widget keys include the store revision, so a reset (cancel, clear, save) rebuilds every input from the store.
# A rejected value is never committed, the revision stays put, and the input keeps showing what was typed.

from __future__ import annotations

import streamlit as st

from pricing_matrix.editor_ui.formatting import format_cell
from pricing_matrix.editor_ui.ui_text import EMPTY_MATRIX, LITE_DERIVATION_HELP, PACKAGE_COLUMN
from pricing_matrix.matrix.session import EditSessionController, SessionView
from pricing_matrix.matrix.types import TIERS


def cell_widget_key(revision: int, row: str, tier: str) -> str:
    return f"matrix-cell:{revision}:{row}:{tier}"


def _commit_cell(session: EditSessionController, row: str, tier: str, widget_key: str) -> None:
    session.finalize_cell(row, tier, str(st.session_state.get(widget_key, "")))


def render_matrix_inputs(session: EditSessionController, view: SessionView) -> None:
    if not view.working:
        st.info(EMPTY_MATRIX)
        return

    header = st.columns(len(TIERS) + 1)
    header[0].markdown(f"**{PACKAGE_COLUMN}**")
    for column, tier in zip(header[1:], TIERS):
        column.markdown(f"**{tier}**", help=LITE_DERIVATION_HELP if tier == TIERS[0] else None)

    for row, tiers in view.working.items():
        columns = st.columns(len(TIERS) + 1)
        columns[0].write(row)
        for column, tier in zip(columns[1:], tiers):
            widget_key = cell_widget_key(view.revision, row, tier)
            column.text_input(
                f"{row} {tier}",
                value=format_cell(tiers[tier]),
                key=widget_key,
                label_visibility="collapsed",
                disabled=not view.cells_editable,
                on_change=_commit_cell,
                args=(session, row, tier, widget_key),
            )
