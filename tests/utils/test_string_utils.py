from __future__ import annotations

import pytest

from utils.string_utils import StringUtils


@pytest.mark.parametrize(
    ("value", "expected"),
    [("es", "es"), ('"ES".', "es"), (" fr\n", "fr"), ("`ja`", "ja"), ("", ""), (None, "")],
)
def test_clean_language_code(value: str | None, expected: str) -> None:
    assert StringUtils.clean_language_code(value) == expected


def test_text_digest_length() -> None:
    assert len(StringUtils.text_digest("hello")) == 16
    assert len(StringUtils.text_digest("hello", length=0)) == 64
    assert StringUtils.text_digest("hello") != StringUtils.text_digest("hello ")


def test_ensure_str() -> None:
    assert StringUtils.ensure_str(None) == ""
    assert StringUtils.ensure_str(" a ") == " a "
