"""
Pull a GSTIN candidate out of free chat text.
"""

from __future__ import annotations

import re

# 2 digits, 5 letters, 4 digits, 1 letter, 1 alnum, literal Z, 1 alnum
_EMBEDDED_GST = re.compile(
    r"\d{2}[A-Z]{5}\d{4}[A-Z][A-Z\d]Z[A-Z\d]", re.IGNORECASE | re.ASCII
)
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")

GST_LENGTH = 15


def extract_gst_number(text: str | None) -> str | None:
    """
    Return an uppercased 15-character candidate, or None.

    The whole message is tried first with separators removed
    ("29 AADCB 2230 M1Z2" counts), then the raw text is searched for an
    embedded GSTIN. The candidate is not validated here.
    """
    if not text:
        return None

    cleaned = _NON_ALNUM.sub("", text).upper()
    if len(cleaned) == GST_LENGTH and cleaned[:2].isdigit():
        return cleaned

    match = _EMBEDDED_GST.search(text)
    return match.group(0).upper() if match else None
