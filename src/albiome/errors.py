from __future__ import annotations


class AlbiomeError(Exception):
    """Base class for every error raised by the biome engine."""


class InvalidConfiguration(AlbiomeError, ValueError):
    """Raised when an entity, network or config is built from unusable values."""


class ShapeMismatchError(AlbiomeError, ValueError):
    """Raised when an input vector does not match the arity it is fed into."""
