r"""Typed items wrapping data tensors, and transforms thereof."""

from .item import ArrayItem
from .item import Item

from .image import Image
from .image import tensortoimage


__all__ = (
    "ArrayItem",
    "Image",
    "Item",
    "tensortoimage",
)
