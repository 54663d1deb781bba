# This file stores the copy used by the pricing matrix editor page.
# It exists so button labels and empty-state wording stay consistent across components.
# Notes produced by the edit session itself live in pricing_matrix.matrix.validation.

from __future__ import annotations

APP_TITLE = "Package Pricing Matrix"
APP_SUBTITLE = "Review the saved package prices and edit them tier by tier."

SAVE_LABEL = "Save"
EDIT_LABEL = "Edit"
CANCEL_LABEL = "Cancel"
CLEAR_LABEL = "Clear"

PACKAGE_COLUMN = "Package"
SAVED_TABLE_TITLE = "Saved prices"
EMPTY_MATRIX = "No pricing matrix is available yet. Check that the pricing API is running."
EMPTY_SAVED = "Nothing has been saved yet."
LITE_DERIVATION_HELP = "Editing a lite price also sets standard to 2x and unlimited to 3x for that package."
