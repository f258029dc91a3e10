"""Errors raised by the annotation engine.

None of them is fatal: each is handled where it is detected and the map
stays interactive afterwards.
"""


class AnnotationError(Exception):
    """Base class for all annotation engine errors."""


class ValidationError(AnnotationError):
    """Rejected input: empty or duplicate category, zone under 3 vertices, ..."""

    def __init__(self, reason: str, message: str | None = None):
        self.reason = reason
        super().__init__(message or reason)


class NotFoundError(AnnotationError):
    def __init__(self, kind: str, item_id: str):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} {item_id!r} not found")


class ParseError(AnnotationError):
    """Malformed import payload or corrupted durable record."""


class InteractionStateError(AnnotationError):
    """A map gesture arrived in an interaction state that does not accept it."""
