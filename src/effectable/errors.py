"""Exceptions raised by effectable."""


class EffectableError(Exception):
    """Base class for effectable errors."""


class DirectMutationViolation(EffectableError, AttributeError):
    """A watched field was assigned or deleted outside of set_state()."""

    def __init__(self, field: str, owner: str | None = None) -> None:
        self.field = field
        self.owner = owner
        super().__init__(
            f'Direct assignment to "{field}" is not allowed. Use set_state(...) instead.'
        )
