r"""Definition of common enumerations."""

from __future__ import annotations

from enum import Enum
from typing import Union


class Color(Enum):
    r"""Enumeration of pixel color types."""

    GRAY = "gray"
    RGB = "rgb"
    RGBA = "rgba"

    @classmethod
    def from_arg(cls, arg: Union[Color, str, None]) -> Color:
        r"""Create enumeration value from function argument."""
        if isinstance(arg, str):
            arg = arg.lower()
        if arg is None or arg in ("default", "grey", "l"):
            return cls.GRAY
        return cls(arg)

    @property
    def nchannels(self) -> int:
        r"""Number of color channels."""
        if self is Color.GRAY:
            return 1
        if self is Color.RGB:
            return 3
        return 4

    def __str__(self) -> str:
        return self.value
