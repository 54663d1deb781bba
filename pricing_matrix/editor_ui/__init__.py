# This package contains the Streamlit editor page for the pricing matrix.
# It separates API access, configuration, copy text, and rendering so each piece stays small.

__all__ = ["app"]
