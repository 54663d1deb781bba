# This package groups the Streamlit components used by the editor page.

__all__ = ["matrix_table", "tables", "toolbar"]
