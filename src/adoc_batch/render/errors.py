"""Exceptions raised by the rendering pipeline."""

from __future__ import annotations


class RenderError(RuntimeError):
    """Raised when a document fails to load or render."""


class UnsupportedInputError(RenderError):
    """Raised when a source reference is of an unrecognized kind."""

    def __init__(self, value: object) -> None:
        self.input_type = type(value)
        super().__init__(
            f"Unsupported input type: {self.input_type.__name__}"
        )


class DependencyError(RenderError):
    """Raised when the AsciiDoc engine library is unavailable."""


__all__ = ["RenderError", "UnsupportedInputError", "DependencyError"]
