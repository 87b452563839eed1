from __future__ import annotations

import pytest

from app.gst.validator import is_valid_gst_format


@pytest.mark.parametrize(
    "gst",
    [
        "29AADCB2230M1Z2",
        "27AAPFU0939F1ZV",
        "07AAACR5055KAZ0",  # letter in the entity position
        "33ABCDE1234FZZ9",
    ],
)
def test_valid_formats(gst: str) -> None:
    assert is_valid_gst_format(gst) is True


@pytest.mark.parametrize(
    "gst",
    [
        "A9AADCB2230M1Z2",  # pos 1 must be digit
        "2AAADCB2230M1Z2",  # pos 2 must be digit
        "291ADCB2230M1Z2",  # pos 3-7 letters
        "29AADC12230M1Z2",
        "29AADCBA230M1Z2",  # pos 8-11 digits
        "29AADCB223AM1Z2",
        "29AADCB22301" + "1Z2",  # pos 12 letter
        "29AADCB2230M0Z2",  # pos 13 is 1-9 or A-Z, never 0
        "29AADCB2230M1Y2",  # pos 14 must be Z
        "29AADCB2230M1Z-",  # pos 15 alnum
    ],
)
def test_single_position_violations_rejected(gst: str) -> None:
    assert len(gst) == 15
    assert is_valid_gst_format(gst) is False


@pytest.mark.parametrize(
    "gst",
    [
        "",
        None,
        "29AADCB2230M1Z",
        "29AADCB2230M1Z22",
        "29aadcb2230m1z2",
        " 29AADCB2230M1Z2",
        "29AADCB2230M1Z2\n",
    ],
)
def test_wrong_length_or_case_rejected(gst) -> None:
    assert is_valid_gst_format(gst) is False
