"""Unit tests for request/correlation id sanitizing."""

import pytest

from app.middleware.request_context import sanitize_id


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("abc-123_XYZ", "abc-123_XYZ"),
        ("  padded  ", "padded"),
        ("a" * 64, "a" * 64),
        ("a" * 65, None),
        ("", None),
        ("bad\nvalue", None),
        ("has space", None),
        ("semi;colon", None),
        (None, None),
    ],
)
def test_sanitize_id(raw, expected) -> None:
    assert sanitize_id(raw) == expected
