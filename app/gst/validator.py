"""
GSTIN structural check.
"""

from __future__ import annotations

import re

# e.g. 29AADCB2230M1Z2
GST_REGEX = re.compile(r"[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]")


def is_valid_gst_format(candidate: str | None) -> bool:
    if not candidate:
        return False
    return GST_REGEX.fullmatch(candidate) is not None
