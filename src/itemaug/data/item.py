r"""Items wrapping the data tensors processed by item transforms."""

from __future__ import annotations

from copy import copy as shallow_copy
from typing import Optional, TypeVar, Union, overload

import torch
from torch import Size, Tensor

from ..core.errors import ShapeMismatchError
from ..core.tensor import as_tensor
from ..core.typing import Array, Device, DType


TItem = TypeVar("TItem", bound="Item")


__all__ = ("ArrayItem", "Item")


class Item:
    r"""Base class of typed containers of a data tensor.

    An item owns a single data tensor. The number of dimensions of an item, its rank, is fixed
    at construction. Operations which produce data of different rank must create a new item.
    The data tensor of an item may be replaced using ``tensor_()``, which is used by buffered
    transforms, whereas ``tensor(data)`` returns a new item and leaves this item unchanged.

    """

    __slots__ = ("_tensor",)

    def __init__(
        self: TItem,
        data: Array,
        dtype: Optional[DType] = None,
        device: Optional[Device] = None,
    ) -> None:
        r"""Initialize item.

        Args:
            data: Item data. A copy is only made if required to create a tensor of
                the specified ``dtype`` on the specified ``device``.
            dtype: Data type of item tensor.
            device: Device on which to store item tensor.

        """
        self._tensor = self._check_tensor(as_tensor(data, dtype=dtype, device=device))

    def _check_tensor(self: TItem, data: Tensor) -> Tensor:
        r"""Validate data tensor of this item type."""
        return data

    @overload
    def tensor(self: TItem) -> Tensor:
        r"""Get item data tensor."""
        ...

    @overload
    def tensor(self: TItem, data: Array) -> TItem:
        r"""Get new item of the same type with specified data tensor."""
        ...

    def tensor(self: TItem, data: Optional[Array] = None) -> Union[Tensor, TItem]:
        r"""Get item data tensor or new item with specified tensor, respectively."""
        if data is None:
            return self._tensor
        other = shallow_copy(self)
        return other.tensor_(data)

    def tensor_(self: TItem, data: Array) -> TItem:
        r"""Change data tensor of this item.

        Raises:
            ShapeMismatchError: If the number of dimensions of the new tensor differs.

        """
        data_ = as_tensor(data, device=self._tensor.device)
        if data_.ndim != self._tensor.ndim:
            raise ShapeMismatchError(
                f"{type(self).__name__}.tensor_() 'data' must have {self._tensor.ndim}"
                f" dimensions, got {data_.ndim}"
            )
        self._tensor = self._check_tensor(data_)
        return self

    @property
    def ndim(self: TItem) -> int:
        r"""Rank of item."""
        return self._tensor.ndim

    @property
    def shape(self: TItem) -> Size:
        r"""Shape of item data tensor."""
        return self._tensor.shape

    @property
    def dtype(self: TItem) -> DType:
        r"""Data type of item data tensor."""
        return self._tensor.dtype

    @property
    def device(self: TItem) -> Device:
        r"""Device on which item data is stored."""
        return self._tensor.device

    def __deepcopy__(self: TItem, memo) -> TItem:
        if id(self) in memo:
            return memo[id(self)]
        result = shallow_copy(self)
        result._tensor = self._tensor.clone(memory_format=torch.preserve_format)
        memo[id(self)] = result
        return result

    def __repr__(self) -> str:
        return (
            type(self).__name__
            + f"(shape={tuple(self.shape)}, dtype={self.dtype}, device={str(self.device)!r})"
        )


class ArrayItem(Item):
    r"""Item with data tensor of arbitrary shape."""

    __slots__ = ()
