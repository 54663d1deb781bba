"""
Package marker for the edit-session core under `pricing_matrix.matrix`.
The store, the session controller, and the backend contract live in the sibling modules.
"""
