r"""Item of image data with color pixels."""

from __future__ import annotations

from typing import Optional, TypeVar, Union

import torch
from torch import Size, Tensor

from ..core.enum import Color
from ..core.errors import ShapeMismatchError
from ..core.image import tensortochannels
from ..core.typing import Array, Device, DType

from .item import Item


TImage = TypeVar("TImage", bound="Image")


__all__ = ("Image", "tensortoimage")


class Image(Item):
    r"""Image with pixels of a given color type sampled on a regular grid.

    The image data tensor is the channel view of the pixel grid, i.e., a tensor of shape
    ``(C, ...X)`` for pixel colors with ``C > 1`` channels, and of shape ``(...X)`` for
    single-channel pixels. The rank of an image is its number of spatial dimensions.

    """

    __slots__ = ("_color",)

    def __init__(
        self: TImage,
        data: Array,
        color: Union[Color, str, None] = None,
        dtype: Optional[DType] = None,
        device: Optional[Device] = None,
    ) -> None:
        r"""Initialize image.

        Args:
            data: Image channel view of shape ``(C, ...X)``, or ``(...X)`` for single-channel pixels.
            color: Pixel color type. Default is ``Color.GRAY``.
            dtype: Data type of pixel channel values.
            device: Device on which to store image data.

        """
        self._color = Color.from_arg(color)
        super().__init__(data, dtype=dtype, device=device)

    @classmethod
    def colorview(cls, color: Union[Color, str], data: Array) -> Image:
        r"""Create image from channel view with channel dimension first."""
        return cls(data, color=color)

    def _check_tensor(self: TImage, data: Tensor) -> Tensor:
        color = self._color
        if color.nchannels == 1:
            if data.ndim < 1:
                raise ShapeMismatchError(f"{type(self).__name__}() data must have shape (...X)")
        elif data.ndim < 2 or data.shape[0] != color.nchannels:
            raise ShapeMismatchError(
                f"{type(self).__name__}() '{color}' image data must have shape"
                f" ({color.nchannels}, ...X), got {tuple(data.shape)}"
            )
        return data

    def channelview(self: TImage) -> Tensor:
        r"""Get image data with separate channel dimension first, if any."""
        return self._tensor

    @property
    def color(self: TImage) -> Color:
        r"""Pixel color type."""
        return self._color

    @property
    def nchannels(self: TImage) -> int:
        r"""Number of color channels."""
        return self._color.nchannels

    @property
    def ndim(self: TImage) -> int:
        r"""Number of spatial dimensions."""
        if self._color.nchannels == 1:
            return self._tensor.ndim
        return self._tensor.ndim - 1

    @property
    def size(self: TImage) -> Size:
        r"""Size of spatial image dimensions."""
        if self._color.nchannels == 1:
            return self._tensor.shape
        return self._tensor.shape[1:]

    def __repr__(self) -> str:
        return (
            type(self).__name__
            + f"(size={tuple(self.size)}, color={str(self.color)!r}"
            + f", dtype={self.dtype}, device={str(self.device)!r})"
        )


def tensortoimage(tensor: Tensor, color: Union[Color, str, None] = None) -> Image:
    r"""Create image from tensor with trailing channel dimension.

    This is the inverse of ``imagetotensor()``, except for the data type conversion.

    Args:
        tensor: Image tensor of shape ``(...X, C)``, or ``(...X)`` for single-channel pixels.
        color: Pixel color type. If ``None``, a 2-dimensional tensor is interpreted as
            grayscale image, and a 3-dimensional tensor as RGB image.

    Returns:
        Image with channel view of ``tensor`` as data.

    """
    if not isinstance(tensor, Tensor):
        tensor = torch.as_tensor(tensor)
    if color is None:
        if tensor.ndim == 2:
            color = Color.GRAY
        elif tensor.ndim == 3:
            color = Color.RGB
        else:
            raise ShapeMismatchError(
                "tensortoimage() 'tensor' must be 2- or 3-dimensional when 'color' is not specified"
            )
    color = Color.from_arg(color)
    return Image(tensortochannels(tensor, color), color=color)
