r"""Item transforms.

Each transform implements the pure ``apply()`` and, optionally, the buffered ``apply_()``
of the item transform protocol defined in ``data.transforms.base``. The module functions
``apply()`` and ``apply_()`` sample the random state of a transform if none is given.

Note that the transforms are included in the ``data`` package next to the item types
on which they operate. The numeric kernels are defined in ``core.image``, which has no
knowledge of item types.

"""

from .array import Denormalize
from .array import Normalize
from .array import ToEltype
from .array import normalize_array

from .base import Pipeline
from .base import Transform
from .base import apply
from .base import apply_
from .base import check_buffer

from .config import PipelineConfig
from .config import TransformConfig
from .config import create_transform

from .image import ImageToTensor


__all__ = (
    # Protocol
    "Transform",
    "Pipeline",
    "apply",
    "apply_",
    "check_buffer",
    # Array transforms
    "Denormalize",
    "Normalize",
    "ToEltype",
    "normalize_array",
    # Image transforms
    "ImageToTensor",
    # Configuration
    "PipelineConfig",
    "TransformConfig",
    "create_transform",
)
