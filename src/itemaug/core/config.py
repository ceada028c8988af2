r"""Base class of dataclass based configurations."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Type, TypeVar

import dacite
import yaml

from .typing import PathStr


T = TypeVar("T", bound="DataclassConfig")


__all__ = ("DataclassConfig",)


@dataclass
class DataclassConfig:
    r"""Base class of configuration dataclasses.

    Configurations can be created from a nested dictionary using ``from_dict()``, or be read
    from a YAML or JSON file using ``from_path()``. The inverse operations are ``asdict()``
    and ``write()``, respectively.

    """

    @classmethod
    def from_dict(cls: Type[T], arg: Mapping[str, Any]) -> T:
        r"""Create configuration from dictionary."""
        config = dacite.Config(cast=[Enum, tuple], strict=True)
        return dacite.from_dict(data_class=cls, data=dict(arg), config=config)

    @classmethod
    def from_path(cls: Type[T], path: PathStr) -> T:
        r"""Read configuration from YAML or JSON file."""
        path = Path(path).absolute()
        text = path.read_text()
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__}.from_path() file {path} must contain a mapping")
        return cls.from_dict(data)

    def asdict(self) -> Dict[str, Any]:
        r"""Get configuration as nested dictionary of plain Python types."""
        return _plain(asdict(self))

    def write(self, path: PathStr) -> None:
        r"""Write configuration to YAML or JSON file."""
        path = Path(path).absolute()
        data = self.asdict()
        if path.suffix == ".json":
            text = json.dumps(data, indent=2)
        else:
            text = yaml.safe_dump(data, sort_keys=False)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)


def _plain(value: Any) -> Any:
    r"""Convert enumerations and tuples to plain values for serialization."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
