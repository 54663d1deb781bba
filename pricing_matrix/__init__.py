"""
Package root for the pricing matrix editor.
It groups the edit-session core, the persistence API, and the editor page under one import path.
Most functionality lives in the sub-packages; this file intentionally stays lightweight.
"""
