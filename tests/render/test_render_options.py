from __future__ import annotations

import pytest

from adoc_batch.render.options import (
    DEFAULT_BACKEND,
    RenderOptions,
    SafeMode,
    outfilesuffix_for,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("unsafe", SafeMode.UNSAFE),
        (" Server ", SafeMode.SERVER),
        (1, SafeMode.SAFE),
        (20, SafeMode.SECURE),
        (SafeMode.SAFE, SafeMode.SAFE),
    ],
)
def test_safe_mode_from_value(value, expected):
    assert SafeMode.from_value(value) is expected


@pytest.mark.parametrize("value", ["paranoid", 5, ""])
def test_safe_mode_rejects_unknown(value):
    with pytest.raises(ValueError, match="Unknown safe mode"):
        SafeMode.from_value(value)


def test_safe_mode_levels_are_ordered():
    levels = [member.value for member in SafeMode]
    assert levels == sorted(levels)


@pytest.mark.parametrize(
    "backend,suffix",
    [
        ("html5", ".html"),
        ("xhtml11", ".html"),
        ("docbook", ".xml"),
        ("docbook45", ".xml"),
        ("slidy", ".slidy"),
    ],
)
def test_outfilesuffix_for(backend, suffix):
    assert outfilesuffix_for(backend) == suffix


def test_requested_backend_precedence():
    assert RenderOptions().requested_backend() == DEFAULT_BACKEND
    assert (
        RenderOptions(attributes={"backend": "docbook"}).requested_backend()
        == "docbook"
    )
    assert (
        RenderOptions(
            attributes={"backend": "docbook"}, backend="xhtml11"
        ).requested_backend()
        == "xhtml11"
    )


def test_defaults():
    options = RenderOptions()
    assert options.header_footer is None
    assert options.in_place is False
    assert options.to_file is None
    assert options.safe is SafeMode.SECURE
