"""
config.py

Render settings. Values come from (lowest to highest priority) the
defaults below, the scene file's "render" block and command-line flags.
"""
import os
from dataclasses import dataclass, fields, replace

from .shading import EPSILON, MAX_DEPTH

MODES = ('auto', 'sequential', 'parallel')
EXECUTORS = ('thread', 'process')


@dataclass(frozen=True)
class RenderConfig:
    width: int = 512
    height: int = 512
    fov: float = 70.0
    max_depth: int = MAX_DEPTH
    epsilon: float = EPSILON
    workers: int = None  # None: one per available CPU
    executor: str = 'process'
    chunk_size: int = 256
    mode: str = 'auto'
    clamp: bool = False

    @property
    def pixels(self):
        return self.width * self.height

    def resolved_workers(self):
        if self.workers is not None:
            return self.workers
        return os.cpu_count() or 1

    def validate(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image size must be positive, got {self.width}x{self.height}")
        if not 0 < self.fov < 180:
            raise ValueError(f"fov must be between 0 and 180 degrees, got {self.fov}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")
        if self.executor not in EXECUTORS:
            raise ValueError(f"executor must be one of {EXECUTORS}, got {self.executor!r}")
        return self

    def merged(self, **overrides):
        """Copy with every non-None override applied and converted to the field type.

        Unknown keys and values of the wrong type raise ValueError.
        """
        types = {f.name: f.type for f in fields(self)}
        unknown = set(overrides) - set(types)
        if unknown:
            raise ValueError(f"unknown render settings: {', '.join(sorted(unknown))}")
        return replace(self, **{k: _coerce(k, types[k], v) for k, v in overrides.items() if v is not None})


def _coerce(name, kind, value):
    """Convert a setting read from a scene file to its field type."""
    if kind is bool:
        if not isinstance(value, bool):
            raise ValueError(f"{name} must be true or false, got {value!r}")
        return value
    if kind is str:
        if not isinstance(value, str):
            raise ValueError(f"{name} must be a string, got {value!r}")
        return value
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        converted = kind(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be {kind.__name__}, got {value!r}") from None
    if kind is int and isinstance(value, float) and converted != value:
        raise ValueError(f"{name} must be int, got {value!r}")
    return converted
