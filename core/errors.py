"""Exceptions raised by the EV engine."""


class EngineError(ValueError):
    """Base class for malformed engine input."""


class InvalidHandError(EngineError):
    """A hand is empty or contains something that is not a card."""


class InvalidCompositionError(EngineError):
    """A shoe composition would go negative or run out mid-resolution."""


class InvalidRulesError(EngineError):
    """A rule combination is contradictory or out of range."""
