r"""Low-level tensor utility functions."""

from typing import Optional, Type, Union, overload

import torch
from torch import Tensor

from .errors import ConversionError, IndexOutOfRangeError
from .typing import Array, Device, DType, DTypeOrKind, Scalar
from .typing import is_bool_dtype, is_float_dtype, is_integral_dtype


def as_tensor(
    arg: Union[Scalar, Array], dtype: Optional[DType] = None, device: Optional[Device] = None
) -> Tensor:
    r"""Create tensor from array if argument is not of type torch.Tensor.

    Unlike ``torch.as_tensor()``, this function preserves the tensor device if ``device=None``.

    """
    if device is None and isinstance(arg, Tensor):
        device = arg.device
    return torch.as_tensor(arg, dtype=dtype, device=device)  # type: ignore


def as_dtype(arg: Union[DType, str]) -> DType:
    r"""Get ``torch.dtype`` from data type or its name, e.g., "float32" or "torch.uint8"."""
    if isinstance(arg, torch.dtype):
        return arg
    if not isinstance(arg, str):
        raise TypeError("as_dtype() 'arg' must be torch.dtype or str")
    name = arg[6:] if arg.startswith("torch.") else arg
    dtype = getattr(torch, name, None)
    if not isinstance(dtype, torch.dtype):
        raise ValueError(f"as_dtype() unknown data type {arg!r}")
    return dtype


def as_dtype_or_kind(arg: DTypeOrKind) -> Union[DType, Type[float], Type[int], Type[bool]]:
    r"""Get concrete ``torch.dtype`` or abstract element type category ``float``, ``int``, or ``bool``."""
    if arg in (float, int, bool):
        return arg  # type: ignore
    if isinstance(arg, str) and arg in ("float", "int", "bool"):
        return {"float": float, "int": int, "bool": bool}[arg]
    return as_dtype(arg)  # type: ignore


def dtype_matches(dtype: DType, target: Union[DType, Type[float], Type[int], Type[bool]]) -> bool:
    r"""Whether ``dtype`` equals or is a member of the ``target`` element type category."""
    if target is float:
        return is_float_dtype(dtype)
    if target is int:
        return is_integral_dtype(dtype)
    if target is bool:
        return is_bool_dtype(dtype)
    return dtype == target


def concrete_dtype(target: Union[DType, Type[float], Type[int], Type[bool]]) -> DType:
    r"""Concrete data type to which tensors are converted for a given target type."""
    if target is float:
        return torch.get_default_dtype()
    if target is int:
        return torch.int64
    if target is bool:
        return torch.bool
    return target  # type: ignore


def check_convertible(data: Tensor, dtype: DType) -> None:
    r"""Check that all tensor values can be represented by the given data type.

    Conversions of real values to a floating point type are always permitted. Complex values
    with non-zero imaginary part are only convertible to a complex type. Conversions to an
    integer or boolean type require finite integral values within the range of the target type.

    Raises:
        ConversionError: When a value of ``data`` is not representable by ``dtype``.

    """
    if data.dtype == dtype or data.numel() == 0:
        return
    if data.is_complex() and not dtype.is_complex:
        if data.imag.ne(0).any():
            raise ConversionError(f"check_convertible() complex values cannot be converted to {dtype}")
        data = data.real
    if not (is_integral_dtype(dtype) or is_bool_dtype(dtype)):
        return
    if data.is_floating_point():
        if not torch.isfinite(data).all():
            raise ConversionError(f"check_convertible() non-finite values cannot be converted to {dtype}")
        if not torch.equal(data, data.trunc()):
            raise ConversionError(f"check_convertible() non-integral values cannot be converted to {dtype}")
    if is_bool_dtype(dtype):
        if not data.eq(0).logical_or(data.eq(1)).all():
            raise ConversionError(f"check_convertible() values must be 0 or 1 to convert to {dtype}")
        return
    if is_bool_dtype(data.dtype):
        return
    info = torch.iinfo(dtype)
    # Python int/float comparison is exact, unlike promotion of tensor scalars
    lo = data.min().item()
    hi = data.max().item()
    if lo < info.min or hi > info.max:
        raise ConversionError(
            f"check_convertible() values in [{lo}, {hi}] exceed range [{info.min}, {info.max}] of {dtype}"
        )


def cast(data: Tensor, dtype: DType) -> Tensor:
    r"""Convert tensor to given data type, raising an error when a value is not representable.

    Args:
        data: Input tensor.
        dtype: Target data type.

    Returns:
        Tensor with specified data type. If ``data.dtype == dtype``, the input tensor is returned.

    Raises:
        ConversionError: When a value of ``data`` cannot be represented exactly by ``dtype``.

    """
    check_convertible(data, dtype)
    if data.is_complex() and not dtype.is_complex:
        data = data.real
    return data.to(dtype)


def move_dim(tensor: Tensor, dim: int, pos: int) -> Tensor:
    r"""Move the specified tensor dimension to another position."""
    if dim < 0:
        dim = tensor.ndim + dim
    if pos < 0:
        pos = tensor.ndim + pos
    if pos == dim:
        return tensor
    if dim < pos:
        pos += 1
    tensor = tensor.unsqueeze(pos)
    if pos <= dim:
        dim += 1
    tensor = tensor.transpose(dim, pos).squeeze(dim)
    return tensor


@overload
def onehot(dtype: DType, index: int, length: int, device: Optional[Device] = None) -> Tensor:
    r"""One-hot vector with specified data type."""
    ...


@overload
def onehot(index: int, length: int, device: Optional[Device] = None) -> Tensor:
    r"""One-hot vector of type ``torch.float32``."""
    ...


def onehot(*args, device: Optional[Device] = None) -> Tensor:
    r"""One-hot encoding of an ordinal position.

    Args:
        dtype: Data type of output vector. If omitted, ``torch.float32`` is used.
        index: Ordinal position of the one element, where ``1 <= index <= length``.
        length: Length of output vector.
        device: Device on which to allocate the output.

    Returns:
        Vector of ``length`` zeros with a one at ordinal position ``index``, i.e., at tensor
        index ``index - 1``.

    Raises:
        IndexOutOfRangeError: If ``index`` is not in ``[1, length]``.

    """
    if len(args) == 3:
        dtype, index, length = args
        dtype = as_dtype(dtype)
    elif len(args) == 2:
        dtype = torch.float32
        index, length = args
    else:
        raise TypeError("onehot() requires arguments (index, length) or (dtype, index, length)")
    if not isinstance(index, int) or not isinstance(length, int):
        raise TypeError("onehot() 'index' and 'length' must be int")
    if length < 1:
        raise ValueError("onehot() 'length' must be positive")
    if index < 1 or index > length:
        raise IndexOutOfRangeError(f"onehot() 'index' must be in [1, {length}], got {index}")
    vector = torch.zeros(length, dtype=dtype, device=device)
    vector[index - 1] = 1
    return vector
