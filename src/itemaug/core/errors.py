r"""Exceptions raised by item transforms.

Each error type derives from the built-in exception that would otherwise be raised,
such that callers may catch either the specific or the generic exception type.

"""


__all__ = (
    "ConversionError",
    "IndexOutOfRangeError",
    "LengthMismatchError",
    "ShapeMismatchError",
)


class LengthMismatchError(ValueError):
    r"""Parameter sequences of a transform have inconsistent lengths."""


class ConversionError(ValueError):
    r"""Tensor value cannot be represented by the target data type."""


class ShapeMismatchError(ValueError):
    r"""Tensor or buffer shape does not match the shape required by an operation."""


class IndexOutOfRangeError(IndexError):
    r"""Index is outside the valid range."""
