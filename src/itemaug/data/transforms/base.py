r"""Item transform application protocol.

Every item transform implements a pure ``apply()``, which returns a new item and leaves its
input unchanged, and optionally a buffered ``apply_()``, which writes its result into the data
tensor of a pre-allocated buffer item of the output shape. The default ``apply_()`` allocates
the result using ``apply()`` and copies it into the buffer.

Following torchvision's lead, item transforms are derived from ``torch.nn.Module``, such that
tensors of fixed transform parameters follow ``Module.to()`` and transforms can be composed
using ``torch.nn.Sequential``. Transform parameters are set at construction and not modified
afterwards. A transform instance may therefore be shared by concurrently running data loader
workers, whereas a buffer item must only ever be used by one ``apply_()`` call at a time.

"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from torch import Generator, Size
from torch.nn import Module, ModuleList

from ...core.errors import ShapeMismatchError
from ...core.logging import get_logger
from ...core.typing import DType

from ..item import Item


__all__ = ("Pipeline", "Transform", "apply", "apply_", "check_buffer")


log = get_logger(__name__)


class Transform(Module):
    r"""Base class of item transforms."""

    def getrandstate(self, generator: Optional[Generator] = None) -> Any:
        r"""Sample random state of one transform application.

        Deterministic transforms do not have a random state and return ``None``.

        """
        return None

    def apply(self, item: Item, randstate: Any = None) -> Item:
        r"""Apply transform to item.

        Args:
            item: Input item, which is not modified.
            randstate: Random state returned by ``getrandstate()``.

        Returns:
            New item.

        """
        raise NotImplementedError(f"{type(self).__name__}.apply()")

    def apply_(self, buf: Item, item: Item, randstate: Any = None) -> Item:
        r"""Apply transform to item and write result to buffer.

        Transforms which do not override this method compute their result with ``apply()``
        and copy it into the given buffer, which must have the shape of the result.

        Args:
            buf: Buffer item, whose data tensor has the shape of the ``apply()`` result.
            item: Input item.
            randstate: Random state returned by ``getrandstate()``.

        Returns:
            Reference to ``buf``.

        Raises:
            ShapeMismatchError: If buffer and result shape differ.

        """
        result = self.apply(item, randstate=randstate)
        check_buffer(self, buf, result.shape)
        buf.tensor().copy_(result.tensor())
        return buf

    def forward(self, item: Item) -> Item:
        return apply(self, item)


def apply(tfm: Transform, item: Item, randstate: Any = None) -> Item:
    r"""Apply transform to item.

    Args:
        tfm: Item transform.
        item: Input item.
        randstate: Random state of transform. If ``None``, it is sampled using ``tfm.getrandstate()``.

    Returns:
        New transformed item.

    """
    if randstate is None:
        randstate = tfm.getrandstate()
    return tfm.apply(item, randstate=randstate)


def apply_(buf: Item, tfm: Transform, item: Item, randstate: Any = None) -> Item:
    r"""Apply transform to item and write result to pre-allocated buffer.

    Args:
        buf: Buffer item with data tensor of the output shape.
        tfm: Item transform.
        item: Input item.
        randstate: Random state of transform. If ``None``, it is sampled using ``tfm.getrandstate()``.

    Returns:
        Reference to ``buf``.

    """
    if randstate is None:
        randstate = tfm.getrandstate()
    return tfm.apply_(buf, item, randstate=randstate)


def check_buffer(
    tfm: Transform, buf: Item, shape: Sequence[int], dtype: Optional[DType] = None
) -> None:
    r"""Check that buffer item has the required shape and data type."""
    if not isinstance(buf, Item):
        raise TypeError(f"{type(tfm).__name__}.apply_() 'buf' must be an Item")
    shape = Size(shape)
    if buf.shape != shape:
        raise ShapeMismatchError(
            f"{type(tfm).__name__}.apply_() 'buf' must have shape {tuple(shape)}, got {tuple(buf.shape)}"
        )
    if dtype is not None and buf.dtype != dtype:
        raise TypeError(f"{type(tfm).__name__}.apply_() 'buf' must have dtype {dtype}, got {buf.dtype}")


class Pipeline(Transform):
    r"""Sequence of item transforms applied one after the other."""

    def __init__(self, *transforms: Transform) -> None:
        super().__init__()
        if len(transforms) == 1 and isinstance(transforms[0], (list, tuple)):
            transforms = tuple(transforms[0])
        for tfm in transforms:
            if not isinstance(tfm, Transform):
                raise TypeError(f"{type(self).__name__}() arguments must be of type Transform")
        self.transforms = ModuleList(transforms)

    def __len__(self) -> int:
        return len(self.transforms)

    def __getitem__(self, index: int) -> Transform:
        return self.transforms[index]

    def getrandstate(self, generator: Optional[Generator] = None) -> Tuple[Any, ...]:
        return tuple(tfm.getrandstate(generator) for tfm in self.transforms)

    def _randstates(self, randstate: Any) -> Tuple[Any, ...]:
        if randstate is None:
            return self.getrandstate()
        if not isinstance(randstate, tuple) or len(randstate) != len(self.transforms):
            raise ValueError(
                f"{type(self).__name__}() 'randstate' must be tuple of length {len(self.transforms)}"
            )
        return randstate

    def apply(self, item: Item, randstate: Any = None) -> Item:
        randstates = self._randstates(randstate)
        for tfm, state in zip(self.transforms, randstates):
            item = apply(tfm, item, randstate=state)
        return item

    def apply_(self, buf: Item, item: Item, randstate: Any = None) -> Item:
        r"""Apply all but the last transform with ``apply()``, and the last one with ``apply_()``."""
        if not self.transforms:
            check_buffer(self, buf, item.shape)
            buf.tensor().copy_(item.tensor())
            return buf
        randstates = self._randstates(randstate)
        for tfm, state in zip(self.transforms[:-1], randstates[:-1]):
            item = apply(tfm, item, randstate=state)
        log.debug("%s.apply_() into buffer of shape %s", type(self).__name__, tuple(buf.shape))
        return apply_(buf, self.transforms[-1], item, randstate=randstates[-1])
