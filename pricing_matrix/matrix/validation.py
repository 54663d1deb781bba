# This module validates raw cell input before anything reaches the matrix store.
# Accepted input is digits with at most one decimal point; the empty string is allowed and reads as zero.
# The note texts shown to the operator live here so the controller and the page share one wording.

from __future__ import annotations

import re
from typing import Final

CELL_INPUT_RE: Final[re.Pattern[str]] = re.compile(r"^[0-9]*\.?[0-9]*$")

INVALID_INPUT_NOTE: Final[str] = "You can't enter letters & symbols, or more than 1 dot"
SAVE_FAILED_NOTE: Final[str] = (
    "The prices could not be saved. Your edits are still here, please try saving again."
)
EDIT_MODE_HINT: Final[str] = "Edit the values in the cells"


def is_valid_input(value: str) -> bool:
    return CELL_INPUT_RE.fullmatch(value) is not None
