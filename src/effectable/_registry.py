"""Field registry — which fields each class declared as watched.

Plain module-level data, keyed by the class object itself. Entries are held
weakly so a dynamically created class can still be garbage collected.

Entries are append-only and populated at class-definition time. Lookups
never fail: an unknown class simply has no watched fields.
"""

from __future__ import annotations

import logging
import threading
import weakref

logger = logging.getLogger("effectable.registry")

# class -> field names in declaration order (duplicates kept)
_fields: weakref.WeakKeyDictionary[type, list[str]] = weakref.WeakKeyDictionary()

# Class creation may race with instance construction in threaded programs.
_lock = threading.Lock()


def register(cls: type, name: str) -> None:
    """Mark ``name`` as a watched field of ``cls``. Never fails."""
    with _lock:
        _fields.setdefault(cls, []).append(name)
    logger.debug("Registered watched field %s.%s", cls.__qualname__, name)


def lookup(cls: type) -> tuple[str, ...]:
    """Fields registered directly on ``cls``. Empty if none."""
    return tuple(_fields.get(cls, ()))


def watched_fields(cls: type) -> tuple[str, ...]:
    """All watched fields for instances of ``cls``, ancestors first.

    Walks the MRO so a subclass picks up fields declared on its bases
    without redeclaring them. First occurrence of a name wins.
    """
    seen: dict[str, None] = {}
    for klass in reversed(cls.__mro__):
        for name in _fields.get(klass, ()):
            seen.setdefault(name, None)
    return tuple(seen)
