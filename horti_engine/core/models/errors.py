from __future__ import annotations

from typing import Optional


class EngineError(ValueError):
    """Base class for every failure raised by the design engine."""

    def __init__(self, message: str, entity: Optional[str] = None) -> None:
        self.entity = entity
        if entity is not None:
            message = f"{entity}: {message}"
        super().__init__(message)


class ValidationError(EngineError):
    """Invalid geometry or configuration supplied by the caller."""


class SizingError(EngineError):
    """No catalog breaker, conductor or conduit satisfies a circuit."""


class ComputationError(EngineError):
    """Internal numeric failure, e.g. a grid without any sample cells."""
