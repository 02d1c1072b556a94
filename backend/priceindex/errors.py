"""Exception hierarchy for the price indexing pipeline."""

from __future__ import annotations


class PriceIndexError(Exception):
    """Base class for all pipeline errors."""


class ConstructionError(PriceIndexError, ValueError):
    """A component was built with a missing collaborator."""


class InvalidSourceError(ConstructionError):
    def __init__(self) -> None:
        super().__init__("invalid source: sample and error queues are required")


class InvalidHandlerError(ConstructionError):
    def __init__(self) -> None:
        super().__init__("invalid handler")


class InvalidCollectorError(ConstructionError):
    def __init__(self) -> None:
        super().__init__("invalid collector")


class StreamError(PriceIndexError):
    """Error published by a price source on its error queue."""

    def __init__(self, instrument: str, message: str) -> None:
        super().__init__(f"{instrument}: {message}")
        self.instrument = instrument


class CollectError(PriceIndexError):
    """First failure of a fan-out collection.

    The triggering error is chained as ``__cause__`` and kept on ``error``.
    """

    def __init__(self, stream_index: int, error: BaseException) -> None:
        super().__init__(f"stream {stream_index} failed: {error!r}")
        self.stream_index = stream_index
        self.error = error


class ParseError(PriceIndexError, ValueError):
    """Sample value is not valid decimal text."""

    def __init__(self, text: object) -> None:
        super().__init__(f"invalid decimal value: {text!r}")
        self.text = text
