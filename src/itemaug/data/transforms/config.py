r"""Configuration of item transform pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Type

from ...core.config import DataclassConfig
from ...core.logging import get_logger

from .array import Denormalize, Normalize, ToEltype
from .base import Pipeline, Transform
from .image import ImageToTensor


__all__ = ("PipelineConfig", "TransformConfig", "create_transform", "TRANSFORMS")


log = get_logger(__name__)


TRANSFORMS: Mapping[str, Type[Transform]] = {
    "Denormalize": Denormalize,
    "ImageToTensor": ImageToTensor,
    "Normalize": Normalize,
    "ToEltype": ToEltype,
}


@dataclass
class TransformConfig(DataclassConfig):
    r"""Configuration of a single item transform.

    The transform ``args`` are passed as keyword arguments to the transform class,
    where data types are given by name, e.g., ``{"dtype": "float32"}``.

    """

    name: str
    args: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PipelineConfig(DataclassConfig):
    r"""Configuration of a sequence of item transforms.

    Example YAML configuration:

    .. code-block:: yaml

        transforms:
          - name: ImageToTensor
            args: {dtype: float32}
          - name: Normalize
            args: {means: [0.485, 0.456, 0.406], stds: [0.229, 0.224, 0.225]}

    """

    transforms: List[TransformConfig] = field(default_factory=list)

    def create(self) -> Pipeline:
        r"""Create transform pipeline."""
        return Pipeline(*[create_transform(config) for config in self.transforms])


def create_transform(config: TransformConfig) -> Transform:
    r"""Create item transform from its configuration."""
    if isinstance(config, Mapping):
        config = TransformConfig.from_dict(config)
    try:
        cls = TRANSFORMS[config.name]
    except KeyError:
        raise ValueError(
            f"create_transform() unknown transform {config.name!r},"
            f" must be one of: {', '.join(sorted(TRANSFORMS))}"
        )
    log.debug("create_transform() %s(**%r)", config.name, config.args)
    return cls(**config.args)
