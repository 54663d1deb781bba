# This file is the Streamlit entrypoint for the pricing matrix editor.
# Each browser session gets its own edit session, built once and kept in st.session_state.
# All state changes go through the session controller; this module only wires and renders.

from __future__ import annotations

import asyncio

import streamlit as st

from pricing_matrix.common.logging import configure_logging
from pricing_matrix.editor_ui.api_client import MatrixApiClient
from pricing_matrix.editor_ui.components.matrix_table import render_matrix_inputs
from pricing_matrix.editor_ui.components.tables import render_table
from pricing_matrix.editor_ui.components.toolbar import render_toolbar
from pricing_matrix.editor_ui.editor_config import load_editor_config
from pricing_matrix.editor_ui.formatting import matrix_frame
from pricing_matrix.editor_ui.ui_text import (
    APP_SUBTITLE,
    APP_TITLE,
    EMPTY_SAVED,
    PACKAGE_COLUMN,
    SAVED_TABLE_TITLE,
)
from pricing_matrix.matrix.backend import ApiMatrixBackend
from pricing_matrix.matrix.session import EditSessionController

SESSION_STATE_KEY = "pricing_matrix_session"


def build_session() -> EditSessionController:
    config = load_editor_config()
    client = MatrixApiClient(
        base_url=config.api_base_url,
        timeout_seconds=config.request_timeout_seconds,
    )
    return EditSessionController(backend=ApiMatrixBackend(client))


def get_session() -> EditSessionController:
    if SESSION_STATE_KEY not in st.session_state:
        session = build_session()
        asyncio.run(session.initialize())
        st.session_state[SESSION_STATE_KEY] = session
    return st.session_state[SESSION_STATE_KEY]


def main() -> None:
    configure_logging()
    st.set_page_config(page_title=APP_TITLE, layout="centered")

    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)

    session = get_session()
    view = session.view()

    render_toolbar(session, view)
    render_matrix_inputs(session, view)

    if view.hint_note:
        st.caption(view.hint_note)
    if view.error_note:
        st.error(view.error_note)

    st.markdown("---")
    render_table(
        matrix_frame(view.original, package_column=PACKAGE_COLUMN),
        title=SAVED_TABLE_TITLE,
        empty_message=EMPTY_SAVED,
    )


if __name__ == "__main__":
    main()
