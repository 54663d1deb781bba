# This file wraps read-only table rendering for the editor page.
# The helper accepts an already-prepared DataFrame and only handles presentation and the empty state.

from __future__ import annotations

import pandas as pd
import streamlit as st


def render_table(
    dataframe: pd.DataFrame,
    *,
    title: str,
    empty_message: str,
) -> None:
    st.subheader(title)
    if dataframe.empty:
        st.info(empty_message)
        return
    st.dataframe(dataframe, use_container_width=True, hide_index=True)
