"""ReactiveModule — base class with watched fields and batched set_state().

Watched fields live in a per-instance state store. They read like normal
attributes but can only be changed through set_state(), which applies a
batch of changes and calls module_did_update() once if anything actually
changed.

Subclasses must call ``super().__init__()`` before relying on reactive
behavior. Anything assigned to a watched field before that call becomes
its starting value.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping

from effectable import _registry
from effectable.errors import EffectableError
from effectable.watched import MISSING, STATE_ATTR, has_changed, install, watched

logger = logging.getLogger("effectable.module")


class ReactiveModule:
    """Base class for objects whose watched fields change only via set_state()."""

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        # A plain data attribute shadowing an inherited watched field
        # redeclares it with a new default. Methods and descriptors are left alone.
        for name in _registry.watched_fields(cls):
            current = cls.__dict__.get(name, MISSING)
            if current is MISSING or callable(current) or hasattr(type(current), "__get__"):
                continue
            install(cls, name, watched(current))

    def __init__(self, **initial: Any) -> None:
        self._apply_watched_fields(initial)

    @classmethod
    def watched_fields(cls) -> tuple[str, ...]:
        """Names of the watched fields, base classes first."""
        return _registry.watched_fields(cls)

    def _apply_watched_fields(self, initial: dict[str, Any]) -> None:
        """Move each watched field's starting value into the state store."""
        fields = self.watched_fields()
        unknown = [key for key in initial if key not in fields]
        if unknown:
            raise TypeError(
                f"{type(self).__name__}() got unexpected watched field(s): "
                + ", ".join(repr(key) for key in unknown)
            )

        state: dict[str, Any] = {}
        for name in fields:
            if name in initial:
                value = initial[name]
            else:
                value = getattr(self, name, None)
            self.__dict__.pop(name, None)
            state[name] = value

        # From here on the descriptors serve reads from the store.
        self.__dict__[STATE_ATTR] = state
        logger.debug("Wired %s with watched fields %s", type(self).__name__, list(fields))

    @property
    def _store(self) -> dict[str, Any]:
        state = self.__dict__.get(STATE_ATTR)
        if state is None:
            raise EffectableError(
                f"{type(self).__name__} is not initialized; "
                "call ReactiveModule.__init__() from its __init__"
            )
        return state

    @property
    def state(self) -> dict[str, Any]:
        """Copy of the current watched values."""
        return dict(self._store)

    def get(self, name: str) -> Any:
        """Current value of watched field ``name``. KeyError if not watched."""
        return self._store[name]

    def set_state(self, partial: Mapping[str, Any] | None = None, /, **changes: Any) -> None:
        """Apply a batch of field changes.

        Fields whose new value differs from the current one are updated and
        reported, in the order given, to module_did_update(). Keys that are
        not watched fields are ignored. If nothing changed, no notification
        is sent.

        Usage:
            counter.set_state({"count": 1, "message": "World"})
            counter.set_state(count=2)
        """
        store = self._store
        prev_state = dict(store)
        updated_keys: list[str] = []

        for key, value in _merge_changes(partial, changes):
            if key not in store:
                logger.debug(
                    "Ignoring %r in %s.set_state(): not a watched field",
                    key, type(self).__name__,
                )
                continue
            if has_changed(store[key], value):
                store[key] = value
                updated_keys.append(key)

        if updated_keys:
            logger.debug("%s updated %s", type(self).__name__, updated_keys)
            self.module_did_update(prev_state, updated_keys)

    def module_did_update(self, prev_state: dict[str, Any], updated_keys: list[str]) -> None:
        """Called after set_state() changed at least one field.

        ``prev_state`` holds every watched value from before the update.
        Does nothing by default; override in a subclass.
        """

    def __repr__(self) -> str:
        state = self.__dict__.get(STATE_ATTR)
        if state is None:
            return f"<{type(self).__name__} (not initialized)>"
        fields = ", ".join(f"{k}={v!r}" for k, v in state.items())
        return f"{type(self).__name__}({fields})"

    def __copy__(self):
        cls = type(self)
        clone = cls.__new__(cls)
        clone.__dict__.update(self.__dict__)
        state = self.__dict__.get(STATE_ATTR)
        if state is not None:
            clone.__dict__[STATE_ATTR] = dict(state)
        return clone


def _merge_changes(
    partial: Mapping[str, Any] | None, changes: dict[str, Any]
) -> Iterator[tuple[str, Any]]:
    """Yield (key, value) from ``partial`` then keyword changes, in order."""
    if partial:
        duplicated = [key for key in changes if key in partial]
        if duplicated:
            raise TypeError(
                "set_state() got multiple values for field(s): "
                + ", ".join(repr(key) for key in duplicated)
            )
        yield from partial.items()
    yield from changes.items()
