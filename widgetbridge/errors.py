"""
Error taxonomy for the callback protocol.

Fatal (abort the current request only):
- MissingParameter: required key absent from the parameter bag
- TypeMismatch: value present but not parseable as the declared type
- UnknownEnumValue: discriminator string matches no known variant
- AlreadyBound: endpoint rebind attempt (raised at bind time)

Recovered silently (see `DropReason`):
- unrecognized event variant
- stale index reference
"""

from __future__ import annotations

from enum import Enum


class DecodeError(ValueError):
    """Base error for parameter bag decoding failures."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class MissingParameter(DecodeError):
    """Raised when a required parameter is absent from the bag."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"missing required parameter: {name}")


class TypeMismatch(DecodeError):
    """Raised when a parameter value cannot be parsed as its declared type."""

    def __init__(self, name: str, expected: str, raw: str) -> None:
        super().__init__(name, f"parameter {name} must be {expected}, got {raw!r}")
        self.expected = expected
        self.raw = raw


class UnknownEnumValue(DecodeError):
    """Raised when a discriminator value matches no enum member."""

    def __init__(self, name: str, enum_name: str, raw: str) -> None:
        super().__init__(name, f"parameter {name}: {raw!r} is not a known {enum_name}")
        self.enum_name = enum_name
        self.raw = raw


class AlreadyBound(RuntimeError):
    """Raised when an endpoint that already owns a widget is bound again."""


class DropReason(str, Enum):
    """
    Why a decoded event was not delivered to its listener.
    """

    UNRECOGNIZED_EVENT_VARIANT = "unrecognized_event_variant"
    STALE_INDEX_REFERENCE = "stale_index_reference"
