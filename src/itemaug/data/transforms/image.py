r"""Image data transforms."""

from __future__ import annotations

from typing import Any, Union

import torch

from ...core import image as U
from ...core.tensor import as_dtype
from ...core.typing import DTypeStr

from ..image import Image
from ..item import ArrayItem, Item

from .base import Transform, check_buffer


__all__ = ("ImageToTensor",)


class ImageToTensor(Transform):
    r"""Expand image to array item with trailing channel dimension.

    An image of size ``(...X)`` with ``C``-channel pixels is converted to an ``ArrayItem``
    of shape ``(...X, C)``. Single-channel images are converted to an ``ArrayItem`` of shape
    ``(...X)``, i.e., without a channel dimension of size one. Channel values are converted
    to the specified data type without rescaling. Supports ``apply_()``.

    """

    def __init__(self, dtype: DTypeStr = torch.float32) -> None:
        r"""Initialize transform.

        Args:
            dtype: Data type of output tensor.

        """
        super().__init__()
        self.dtype = as_dtype(dtype)

    def apply(self, item: Item, randstate: Any = None) -> ArrayItem:
        image = self._check_image(item, "apply")
        data = U.imagetotensor(image.channelview(), image.color, dtype=self.dtype)
        return ArrayItem(data)

    def apply_(self, buf: Union[ArrayItem, Item], item: Item, randstate: Any = None) -> ArrayItem:
        image = self._check_image(item, "apply_")
        if not isinstance(buf, ArrayItem):
            raise TypeError(f"{type(self).__name__}.apply_() 'buf' must be an ArrayItem")
        shape = U.imagetotensor_shape(image.channelview().shape, image.color)
        check_buffer(self, buf, shape, self.dtype)
        U.imagetotensor_(buf.tensor(), image.channelview(), image.color)
        return buf

    def _check_image(self, item: Item, method: str) -> Image:
        if not isinstance(item, Image):
            raise TypeError(f"{type(self).__name__}.{method}() 'item' must be an Image")
        return item

    def extra_repr(self) -> str:
        return f"dtype={self.dtype}"
