"""Watched fields — the class-level marker for reactive state.

A ``watched`` descriptor in a class body registers its field with the
registry when the class is created. Until ReactiveModule wires the
instance, the field behaves like an ordinary attribute so ``__init__`` can
assign its starting value. After wiring, reads come from the instance's
state store and every write raises DirectMutationViolation.

Usage:
    class Counter(ReactiveModule):
        count = watched(0)
        history = watched(default_factory=list)
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from effectable import _registry
from effectable.errors import DirectMutationViolation

T = TypeVar("T")

# Instance attribute holding the state store once the instance is wired.
# Namespaced so subclasses can keep their own `_state`.
STATE_ATTR = "_effectable_state"

MISSING: Any = object()

# Compared by value. Anything else is compared by identity.
_PRIMITIVES = (type(None), bool, int, float, complex, str, bytes)


def has_changed(old: object, new: object) -> bool:
    """Whether replacing ``old`` with ``new`` counts as a change.

    Primitives of the same type compare by value, everything else by
    identity. There is no deep comparison: a new list with equal contents
    is a change.
    """
    if old is new:
        return False
    if type(old) is type(new) and isinstance(old, _PRIMITIVES):
        return old != new
    return True


class watched:
    """Descriptor marking a class attribute as a watched field."""

    __slots__ = ("name", "default", "default_factory")

    def __init__(
        self,
        default: Any = MISSING,
        *,
        default_factory: Callable[[], Any] | Any = MISSING,
    ) -> None:
        if default is not MISSING and default_factory is not MISSING:
            raise ValueError("cannot specify both default and default_factory")
        self.name: str | None = None
        self.default = default
        self.default_factory = default_factory

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        _registry.register(owner, name)

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        state = instance.__dict__.get(STATE_ATTR)
        if state is not None and self.name in state:
            return state[self.name]
        # Not wired yet: plain attribute semantics.
        try:
            return instance.__dict__[self.name]
        except KeyError:
            pass
        if self.default_factory is not MISSING:
            value = instance.__dict__[self.name] = self.default_factory()
            return value
        if self.default is not MISSING:
            return self.default
        raise AttributeError(
            f"{type(instance).__name__!r} object has no attribute {self.name!r}"
        )

    def __set__(self, instance, value) -> None:
        self._check_unwired(instance)
        instance.__dict__[self.name] = value

    def __delete__(self, instance) -> None:
        self._check_unwired(instance)
        try:
            del instance.__dict__[self.name]
        except KeyError:
            raise AttributeError(self.name) from None

    def _check_unwired(self, instance) -> None:
        state = instance.__dict__.get(STATE_ATTR)
        if state is not None and self.name in state:
            raise DirectMutationViolation(self.name, type(instance).__name__)

    def __repr__(self) -> str:
        if self.default_factory is not MISSING:
            return f"watched(default_factory={self.default_factory!r})"
        if self.default is not MISSING:
            return f"watched({self.default!r})"
        return "watched()"


def install(cls: type, name: str, descriptor: watched) -> None:
    """Attach ``descriptor`` to an existing class and register it."""
    setattr(cls, name, descriptor)
    descriptor.__set_name__(cls, name)


def watch_fields(*names: str) -> Callable[[type[T]], type[T]]:
    """Class decorator: declare ``names`` as watched fields.

    For classes that assign their fields in ``__init__`` rather than with
    ``watched(...)`` in the class body. A plain class attribute of the same
    name becomes the field's default.

    Usage:
        @watch_fields("count", "message")
        class Counter(ReactiveModule):
            message = "Hello"

            def __init__(self):
                self.count = 0
                super().__init__()
    """

    bad = [name for name in names if not isinstance(name, str) or not name.isidentifier()]
    if bad:
        raise ValueError(f"Watched field names must be identifiers, got {bad!r}")

    def decorate(cls: type[T]) -> type[T]:
        for name in names:
            current = cls.__dict__.get(name, MISSING)
            if current is MISSING:
                current = getattr(cls, name, MISSING)
            if isinstance(current, watched):
                continue
            install(cls, name, watched(current))
        return cls

    return decorate
