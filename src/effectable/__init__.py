"""Effectable: watched fields and batched state updates for plain Python objects."""

from importlib.metadata import version as _version

__version__ = _version("effectable")

from effectable.errors import EffectableError, DirectMutationViolation
from effectable.watched import watched, watch_fields, has_changed
from effectable.module import ReactiveModule

__all__ = [
    "ReactiveModule",
    "watched",
    "watch_fields",
    "has_changed",
    "EffectableError",
    "DirectMutationViolation",
]
