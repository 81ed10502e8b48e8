"""
Parameter codec: primitive values <-> flat query-string parameter bag.

Wire representation:
- instant: decimal epoch milliseconds
- boolean: literal `true` / `false` (case-sensitive)
- integer / long: decimal
- enum / discriminator: member name (exact, then case-insensitive match)

Every decoder takes an optional per-field `default`. Without one, a missing key
raises `MissingParameter`. A present but malformed value always raises
`TypeMismatch`, even when a default exists.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Mapping, Type, TypeVar
from urllib.parse import quote

from widgetbridge.errors import MissingParameter, TypeMismatch, UnknownEnumValue

ParameterBag = Mapping[str, str]

E = TypeVar("E", bound=Enum)

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

MS_PER_MINUTE = 60_000
MS_PER_DAY = 86_400_000

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_INT_RE = re.compile(r"^[+-]?\d+$")


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


def to_epoch_millis(ts: datetime) -> int:
    # Naive datetimes are taken as UTC.
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        ts = ts.replace(tzinfo=timezone.utc)
    delta = ts - EPOCH
    return (delta.days * MS_PER_DAY) + (delta.seconds * 1000) + (delta.microseconds // 1000)


def from_epoch_millis(ms: int) -> datetime:
    return EPOCH + timedelta(milliseconds=ms)


def encode_value(value: Any) -> str:
    """
    Wire text for a single value (not URL-encoded).
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return str(to_epoch_millis(value))
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, int):
        return str(value)
    if value is None:
        raise TypeError("cannot encode None")
    return str(value)


def encode(name: str, value: Any) -> str:
    """
    Query fragment `&name=value`, URL-encoded, ready to append to a callback URL.
    """
    return f"&{quote(str(name), safe='')}={quote(encode_value(value), safe='')}"


def encode_bag(values: Mapping[str, Any]) -> str:
    return "".join(encode(k, v) for k, v in values.items())


def _raw(bag: ParameterBag, name: str) -> str | None:
    v = bag.get(name)
    if v is None:
        return None
    return str(v)


def _parse_integer(name: str, raw: str, *, lo: int, hi: int, expected: str) -> int:
    s = raw.strip()
    if not _INT_RE.match(s):
        raise TypeMismatch(name, expected, raw)
    v = int(s)
    if v < lo or v > hi:
        raise TypeMismatch(name, expected, raw)
    return v


def decode_long(bag: ParameterBag, name: str, *, default: Any = MISSING) -> int:
    raw = _raw(bag, name)
    if raw is None:
        if default is MISSING:
            raise MissingParameter(name)
        return default
    return _parse_integer(name, raw, lo=INT64_MIN, hi=INT64_MAX, expected="a 64-bit integer")


def decode_int(bag: ParameterBag, name: str, *, default: Any = MISSING) -> int:
    raw = _raw(bag, name)
    if raw is None:
        if default is MISSING:
            raise MissingParameter(name)
        return default
    return _parse_integer(name, raw, lo=INT32_MIN, hi=INT32_MAX, expected="a 32-bit integer")


def decode_bool(bag: ParameterBag, name: str, *, default: Any = MISSING) -> bool:
    raw = _raw(bag, name)
    if raw is None:
        if default is MISSING:
            raise MissingParameter(name)
        return default
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise TypeMismatch(name, "'true' or 'false'", raw)


def decode_str(bag: ParameterBag, name: str, *, default: Any = MISSING) -> str:
    raw = _raw(bag, name)
    if raw is None:
        if default is MISSING:
            raise MissingParameter(name)
        return default
    return raw


def decode_instant(bag: ParameterBag, name: str, *, default: Any = MISSING) -> datetime:
    raw = _raw(bag, name)
    if raw is None:
        if default is MISSING:
            raise MissingParameter(name)
        return default
    ms = _parse_integer(name, raw, lo=INT64_MIN, hi=INT64_MAX, expected="epoch milliseconds")
    try:
        return from_epoch_millis(ms)
    except (OverflowError, ValueError) as e:
        # In 64-bit range but outside what datetime can hold.
        raise TypeMismatch(name, "epoch milliseconds", raw) from e


def lookup_enum(enum_cls: Type[E], raw: str, *, name: str = "value") -> E:
    """
    Resolve `raw` against member names (and values), exact first, then case-insensitive.
    """
    for member in enum_cls:
        if member.name == raw or member.value == raw:
            return member
    folded = raw.casefold()
    for member in enum_cls:
        if member.name.casefold() == folded or str(member.value).casefold() == folded:
            return member
    raise UnknownEnumValue(name, enum_cls.__name__, raw)


def decode_enum(bag: ParameterBag, name: str, enum_cls: Type[E], *, default: Any = MISSING) -> E:
    raw = _raw(bag, name)
    if raw is None:
        if default is MISSING:
            raise MissingParameter(name)
        return default
    return lookup_enum(enum_cls, raw, name=name)


def compute_delta(day_delta: int, minute_delta: int) -> int:
    """
    Duration in milliseconds from a whole-day count and a minute count.
    """
    return (day_delta * MS_PER_DAY) + (minute_delta * MS_PER_MINUTE)
