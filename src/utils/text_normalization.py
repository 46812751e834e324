"""
Place-name normalization.

Names coming from the boundary layers, the zone mapping spreadsheet and the
emergency contact table are spelled inconsistently ("Méknès", "MEKNES ",
"meknes"). Every cross-dataset comparison goes through :func:`normalize`; two
names denote the same place iff their normalized forms are equal.
"""

import re
import unicodedata
from typing import Any


# Combining Diacritical Marks block only
_COMBINING_MARKS = re.compile("[\u0300-\u036f]")


def normalize(value: Any) -> str:
    """Return the comparison key for a place name.

    Trims, lowercases, decomposes to NFD and drops combining diacritical marks
    (U+0300 to U+036F). Non-string input is coerced with ``str``; ``None``
    becomes the empty string.

    Args:
        value: Any value, usually a place name

    Returns:
        Normalized string, safe to compare with ``==``
    """
    if value is None:
        return ""

    text = unicodedata.normalize("NFD", str(value).strip().lower())
    return _COMBINING_MARKS.sub("", text).strip()
