"""Exceptions raised while loading a translation memory."""


class DecodeFailure(ValueError):
    """The document could not be decoded into a TMX tree at all."""


class MalformedUnitError(ValueError):
    """A translation unit has no language variants."""

    def __init__(self, position: int, unit_id: str | None = None) -> None:
        self.position = position
        self.unit_id = unit_id
        label = f"tuid={unit_id!r}" if unit_id else f"position {position}"
        super().__init__(f"Translation unit at {label} has no variants")


class EngineError(RuntimeError):
    """The search engine failed while handling a request."""
