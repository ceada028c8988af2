r"""Type annotations and data type predicates."""

from pathlib import Path
from typing import Any, Dict, Protocol, Sequence, Type, Union

import torch

from torch import Tensor


Device = torch.device
DType = torch.dtype
DTypeStr = Union[torch.dtype, str]
Scalar = Union[int, float, Tensor]
Array = Union[Sequence[Scalar], Tensor]

# Either a concrete dtype or one of the abstract element type categories float, int, or bool
DTypeOrKind = Union[torch.dtype, str, Type[float], Type[int], Type[bool]]

PathStr = Union[Path, str]


class Dataclass(Protocol):
    r"""Type annotation for any dataclass."""

    __dataclass_fields__: Dict[str, Any]


def is_bool_dtype(dtype: DType) -> bool:
    r"""Checks if ``dtype`` of given NumPy array or PyTorch tensor is boolean type."""
    return dtype in (torch.bool,)


def is_float_dtype(dtype: DType) -> bool:
    r"""Checks if ``dtype`` of given tensor is a floating point type."""
    return dtype in (torch.float16, torch.bfloat16, torch.float32, torch.float64)


def is_int_dtype(dtype: DType) -> bool:
    r"""Checks if ``dtype`` of given tensor is a signed integer type."""
    return dtype in (torch.int8, torch.int16, torch.int32, torch.int64)


def is_uint_dtype(dtype: DType) -> bool:
    r"""Checks if ``dtype`` of given tensor is an unsigned integer type."""
    return dtype in (torch.uint8,)


def is_integral_dtype(dtype: DType) -> bool:
    r"""Checks if ``dtype`` of given tensor is a signed or unsigned integer type."""
    return is_int_dtype(dtype) or is_uint_dtype(dtype)
