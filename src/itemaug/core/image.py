r"""Numeric kernels operating on image and array data tensors.

The functions in this module have no knowledge of the item types defined in ``data``.
They are shared by the pure and buffered code paths of the respective data transforms.
Functions with a trailing underscore modify their first tensor argument in place.

"""

from typing import Optional, Tuple, Union

import torch
from torch import Size, Tensor

from .enum import Color
from .errors import ShapeMismatchError
from .tensor import as_tensor, move_dim
from .typing import Array, Device, DType, Scalar


__all__ = (
    "channel_stats",
    "denormalize",
    "denormalize_",
    "imagetotensor",
    "imagetotensor_",
    "imagetotensor_shape",
    "normalize",
    "normalize_",
    "tensortochannels",
)


def channel_stats(
    values: Union[Scalar, Array],
    ndim: int,
    dtype: Optional[DType] = None,
    device: Optional[Device] = None,
) -> Tensor:
    r"""Reshape per-channel values such that they broadcast along the last dimension.

    Args:
        values: Sequence of ``C`` values, one for each channel.
        ndim: Number of dimensions of the data tensor.
        dtype: Data type of output tensor.
        device: Device on which to store output tensor.

    Returns:
        Tensor of shape ``(1, ..., 1, C)`` with ``ndim`` dimensions.

    """
    if ndim < 1:
        raise ValueError("channel_stats() 'ndim' must be positive")
    values = as_tensor(values, dtype=dtype, device=device).flatten()
    return values.reshape((1,) * (ndim - 1) + (values.numel(),))


def normalize_(a: Tensor, means: Union[Scalar, Tensor], stds: Union[Scalar, Tensor]) -> Tensor:
    r"""Subtract ``means`` and divide by ``stds`` in place."""
    a.sub_(means)
    a.div_(stds)
    return a


def normalize(a: Tensor, means: Union[Scalar, Tensor], stds: Union[Scalar, Tensor]) -> Tensor:
    r"""Subtract ``means`` and divide by ``stds``."""
    return normalize_(a.clone(), means, stds)


def denormalize_(a: Tensor, means: Union[Scalar, Tensor], stds: Union[Scalar, Tensor]) -> Tensor:
    r"""Multiply by ``stds`` and add ``means`` in place."""
    a.mul_(stds)
    a.add_(means)
    return a


def denormalize(a: Tensor, means: Union[Scalar, Tensor], stds: Union[Scalar, Tensor]) -> Tensor:
    r"""Multiply by ``stds`` and add ``means``."""
    return denormalize_(a.clone(), means, stds)


def imagetotensor_shape(shape: Tuple[int, ...], color: Color) -> Size:
    r"""Shape of tensor with trailing channel dimension given shape of image channel view.

    Args:
        shape: Shape ``(C, ...X)`` of multi-channel image data, or ``(...X)`` of single-channel data.
        color: Pixel color type.

    Returns:
        Shape ``(...X, C)`` for multi-channel, and ``(...X)`` for single-channel images.

    """
    shape = Size(shape)
    if color.nchannels == 1:
        return shape
    if len(shape) < 2 or shape[0] != color.nchannels:
        raise ShapeMismatchError(
            f"imagetotensor_shape() '{color}' image data must have shape ({color.nchannels}, ...X)"
        )
    return shape[1:] + (color.nchannels,)


def imagetotensor_(out: Tensor, data: Tensor, color: Color) -> Tensor:
    r"""Write image channels to output tensor with channel dimension moved to the last position.

    Args:
        out: Output tensor of shape ``(...X, C)`` or ``(...X)`` for single-channel images.
        data: Image channel view of shape ``(C, ...X)``, or ``(...X)`` if ``color`` has one channel.
        color: Pixel color type.

    Returns:
        Reference to ``out`` tensor with values converted to its data type.

    """
    shape = imagetotensor_shape(data.shape, color)
    if out.shape != shape:
        raise ShapeMismatchError(
            f"imagetotensor_() 'out' must have shape {tuple(shape)}, got {tuple(out.shape)}"
        )
    if color.nchannels == 1:
        return out.copy_(data)
    return out.copy_(move_dim(data, 0, -1))


def imagetotensor(data: Tensor, color: Color, dtype: DType = torch.float32) -> Tensor:
    r"""Convert image channel view to tensor with channel dimension moved to the last position.

    Single-channel images are not given a channel dimension, i.e., the shape of the output
    tensor equals the shape of the single-channel image data.

    Args:
        data: Image channel view of shape ``(C, ...X)``, or ``(...X)`` if ``color`` has one channel.
        color: Pixel color type.
        dtype: Data type of output tensor.

    Returns:
        New tensor of shape ``(...X, C)`` or ``(...X)``, respectively.

    """
    shape = imagetotensor_shape(data.shape, color)
    out = torch.empty(shape, dtype=dtype, device=data.device)
    return imagetotensor_(out, data, color)


def tensortochannels(tensor: Tensor, color: Color) -> Tensor:
    r"""Move trailing channel dimension of tensor to the front.

    This is the inverse of ``imagetotensor()``, except for the data type conversion.

    Args:
        tensor: Tensor of shape ``(...X, C)``, or ``(...X)`` if ``color`` has one channel.
        color: Pixel color type.

    Returns:
        View of ``tensor`` with shape ``(C, ...X)``, or ``tensor`` itself if ``color`` has one channel.

    """
    if color.nchannels == 1:
        if tensor.ndim < 1:
            raise ShapeMismatchError("tensortochannels() 'tensor' must have at least one dimension")
        return tensor
    if tensor.ndim < 2 or tensor.shape[-1] != color.nchannels:
        raise ShapeMismatchError(
            f"tensortochannels() '{color}' tensor must have shape (...X, {color.nchannels})"
        )
    return move_dim(tensor, -1, 0)
