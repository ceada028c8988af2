r"""Common types and functions that operate on tensors representing item data.

Besides defining common types and auxiliary functions, this core library in particular defines
functions which operate on objects of type ``torch.Tensor``. These functions have no knowledge
of the item types defined in ``itemaug.data``. The data transforms use this functional API to
realize both their pure ``apply()`` and their buffered ``apply_()`` code path.

The following import statement can be used to access the numeric kernels:

.. code::

    import itemaug.core.image as U

"""

from .config import DataclassConfig

from .enum import Color

from .errors import ConversionError
from .errors import IndexOutOfRangeError
from .errors import LengthMismatchError
from .errors import ShapeMismatchError

from .logging import LOG_FORMAT
from .logging import LogLevel
from .logging import configure_logging
from .logging import get_logger

from .tensor import as_dtype
from .tensor import as_tensor
from .tensor import cast
from .tensor import check_convertible
from .tensor import move_dim
from .tensor import onehot

from .typing import Array
from .typing import Dataclass
from .typing import Device
from .typing import DType
from .typing import PathStr
from .typing import Scalar


__all__ = (
    "Array",
    "Color",
    "ConversionError",
    "Dataclass",
    "DataclassConfig",
    "Device",
    "DType",
    "IndexOutOfRangeError",
    "LengthMismatchError",
    "LOG_FORMAT",
    "LogLevel",
    "PathStr",
    "Scalar",
    "ShapeMismatchError",
    "as_dtype",
    "as_tensor",
    "cast",
    "check_convertible",
    "configure_logging",
    "get_logger",
    "move_dim",
    "onehot",
)
