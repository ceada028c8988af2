r"""Transforms of items with data tensors of arbitrary shape."""

from __future__ import annotations

from typing import Any, Tuple, Union

import torch
from torch import Tensor

from ...core import image as U
from ...core.errors import LengthMismatchError, ShapeMismatchError
from ...core.logging import get_logger
from ...core.tensor import as_dtype_or_kind, as_tensor, cast, check_convertible
from ...core.tensor import concrete_dtype, dtype_matches
from ...core.typing import Array, DTypeOrKind, Scalar

from ..item import ArrayItem, Item

from .base import Transform, check_buffer


__all__ = ("Denormalize", "Normalize", "ToEltype", "normalize_array")


log = get_logger(__name__)


class ToEltype(Transform):
    r"""Convert data tensor of item to specified data type.

    The target type is either a concrete ``torch.dtype``, or one of the element type categories
    ``float``, ``int``, and ``bool``. Items whose data type already equals the target type, or
    belongs to the target category, are returned unchanged. Supports ``apply_()``.

    """

    def __init__(self, dtype: DTypeOrKind) -> None:
        r"""Initialize transform.

        Args:
            dtype: Target data type, data type name, or element type category.
                A category converts items not yet of this category to its default type,
                i.e., ``float`` to ``torch.get_default_dtype()``, and ``int`` to ``torch.int64``.

        """
        super().__init__()
        self.target = as_dtype_or_kind(dtype)

    @property
    def dtype(self) -> torch.dtype:
        r"""Data type of converted items."""
        return concrete_dtype(self.target)

    def apply(self, item: Item, randstate: Any = None) -> Item:
        if not isinstance(item, Item):
            raise TypeError(f"{type(self).__name__}.apply() 'item' must be an Item")
        if dtype_matches(item.dtype, self.target):
            return item
        return item.tensor(cast(item.tensor(), self.dtype))

    def apply_(self, buf: Item, item: Item, randstate: Any = None) -> Item:
        if not isinstance(item, Item):
            raise TypeError(f"{type(self).__name__}.apply_() 'item' must be an Item")
        check_buffer(self, buf, item.shape)
        if not dtype_matches(buf.dtype, self.target):
            raise TypeError(
                f"{type(self).__name__}.apply_() 'buf' must have dtype {self._target_name()}, got {buf.dtype}"
            )
        data = item.tensor()
        check_convertible(data, buf.dtype)
        buf.tensor().copy_(data)
        return buf

    def _target_name(self) -> str:
        if isinstance(self.target, torch.dtype):
            return str(self.target)
        return self.target.__name__

    def extra_repr(self) -> str:
        return f"dtype={self._target_name()}"


class _ChannelStatsTransform(Transform):
    r"""Base class of transforms parameterized by per-channel statistics."""

    def __init__(self, means: Union[Scalar, Array], stds: Union[Scalar, Array]) -> None:
        super().__init__()
        means_ = as_tensor(means, dtype=torch.float64).flatten().clone()
        stds_ = as_tensor(stds, dtype=torch.float64).flatten().clone()
        if means_.numel() != stds_.numel():
            raise LengthMismatchError(
                f"{type(self).__name__}() 'means' and 'stds' must have same length,"
                f" got {means_.numel()} and {stds_.numel()}"
            )
        if means_.numel() == 0:
            raise ValueError(f"{type(self).__name__}() 'means' and 'stds' must not be empty")
        self.register_buffer("means", means_)
        self.register_buffer("stds", stds_)

    @property
    def nchannels(self) -> int:
        r"""Number of channels."""
        return self.means.numel()

    def _check_data(self, data: Tensor, name: str) -> None:
        if not data.is_floating_point():
            raise TypeError(
                f"{type(self).__name__}() '{name}' must have floating point type, got {data.dtype};"
                " use ToEltype to convert it first"
            )
        if data.ndim < 1 or data.shape[-1] != self.nchannels:
            raise ShapeMismatchError(
                f"{type(self).__name__}() '{name}' must have last dimension of size"
                f" {self.nchannels}, got shape {tuple(data.shape)}"
            )

    def _stats(self, data: Tensor) -> Tuple[Tensor, Tensor]:
        r"""Statistics reshaped for broadcasting along the last dimension of ``data``."""
        means = U.channel_stats(self.means, data.ndim, dtype=data.dtype, device=data.device)
        stds = U.channel_stats(self.stds, data.ndim, dtype=data.dtype, device=data.device)
        return means, stds

    def _kernel(self, data: Tensor, means: Tensor, stds: Tensor) -> Tensor:
        raise NotImplementedError

    def _kernel_(self, data: Tensor, means: Tensor, stds: Tensor) -> Tensor:
        raise NotImplementedError

    def apply(self, item: Item, randstate: Any = None) -> Item:
        if not isinstance(item, ArrayItem):
            raise TypeError(f"{type(self).__name__}.apply() 'item' must be an ArrayItem")
        data = item.tensor()
        self._check_data(data, "item")
        means, stds = self._stats(data)
        return item.tensor(self._kernel(data, means, stds))

    def apply_(self, buf: Item, item: Item, randstate: Any = None) -> Item:
        if not isinstance(item, ArrayItem):
            raise TypeError(f"{type(self).__name__}.apply_() 'item' must be an ArrayItem")
        data = item.tensor()
        self._check_data(data, "item")
        check_buffer(self, buf, data.shape, data.dtype)
        out = buf.tensor()
        means, stds = self._stats(out)
        out.copy_(data)
        self._kernel_(out, means, stds)
        return buf

    def extra_repr(self) -> str:
        return f"means={tuple(self.means.tolist())}, stds={tuple(self.stds.tolist())}"


class Normalize(_ChannelStatsTransform):
    r"""Normalize channels of item data, where the channel dimension is the last dimension.

    The normalized data is ``(data - means) / stds``, where the statistics are broadcast along
    all but the last dimension. Supports ``apply_()``.

    """

    def _kernel(self, data: Tensor, means: Tensor, stds: Tensor) -> Tensor:
        return U.normalize(data, means, stds)

    def _kernel_(self, data: Tensor, means: Tensor, stds: Tensor) -> Tensor:
        return U.normalize_(data, means, stds)

    def inverse(self) -> Denormalize:
        r"""Transform which reverts the normalization."""
        return Denormalize(self.means, self.stds)


class Denormalize(_ChannelStatsTransform):
    r"""Revert normalization of item data channels, where the channel dimension is the last dimension.

    The denormalized data is ``data * stds + means``. Supports ``apply_()``.

    """

    def _kernel(self, data: Tensor, means: Tensor, stds: Tensor) -> Tensor:
        return U.denormalize(data, means, stds)

    def _kernel_(self, data: Tensor, means: Tensor, stds: Tensor) -> Tensor:
        return U.denormalize_(data, means, stds)

    def inverse(self) -> Normalize:
        r"""Transform which applies the normalization."""
        return Normalize(self.means, self.stds)


def normalize_array(array: Tensor) -> Tuple[Tensor, float, float]:
    r"""Normalize tensor in place using the mean and standard deviation of all its values.

    This function estimates the statistics from the given data. Use it to compute the parameters
    of a ``Normalize`` transform, rather than to normalize data within a transform pipeline.

    Args:
        array: Floating point tensor, which is modified in place.

    Returns:
        Reference to normalized ``array``, and the estimated mean and (unbiased) standard deviation.

    """
    if not isinstance(array, Tensor):
        raise TypeError("normalize_array() 'array' must be torch.Tensor")
    if not array.is_floating_point():
        raise TypeError("normalize_array() 'array' must have floating point type")
    mean = array.mean()
    std = array.std()
    log.debug("normalize_array() mean=%s, std=%s", mean.item(), std.item())
    U.normalize_(array, mean, std)
    return array, mean.item(), std.item()
