"""Route and query parameter readers.

Every reader takes a parameter source, a key and a default, and returns a
``ParamResult`` of ``(value, present, error)``. Absent keys always yield the
default with ``present=False`` and no error. Malformed values yield the
default together with a ``ParameterError`` naming the key, so callers can
collect several failures before responding.
"""

from __future__ import annotations

import math
import re
import struct
from typing import Any
from typing import Generic
from typing import Iterator
from typing import Mapping
from typing import NamedTuple
from typing import Optional
from typing import Protocol
from typing import Sequence
from typing import TypeVar
from uuid import UUID

from apihelpers.exceptions import ParameterError

T = TypeVar("T")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

TRUE_VALUES = frozenset({"true", "t", "y", "1"})
FALSE_VALUES = frozenset({"false", "f", "n", "0"})

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UUID_HEX = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
_UUID_RE = re.compile(
    rf"(?:urn:uuid:)?{_UUID_HEX}|\{{{_UUID_HEX}\}}|[0-9a-f]{{32}}",
    re.IGNORECASE,
)
_INF_RE = re.compile(r"[+-]?(?:inf|infinity)", re.IGNORECASE)
_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE,
)


class ParamSource(Protocol):
    """Anything that can look up a parameter and test for its existence."""

    def get(self, key: str) -> Optional[str]:
        ...

    def __contains__(self, key: object) -> bool:
        ...


class ParamResult(NamedTuple, Generic[T]):
    """Outcome of reading a single parameter."""

    value: T
    present: bool
    error: Optional[ParameterError] = None

    def unwrap(self) -> T:
        """Return the value, raising the parameter error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value


class QueryParams(Mapping[str, str]):
    """Query string parameters collected from an API Gateway event.

    Lookups return the first value supplied for a key; ``get_all`` returns
    every value in the order they were received.
    """

    def __init__(self, values: Optional[Mapping[str, Sequence[str]]] = None):
        self._values: dict[str, list[str]] = {
            key: list(items) for key, items in (values or {}).items() if items
        }

    def __getitem__(self, key: str) -> str:
        return self._values[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get_all(self, key: str) -> list[str]:
        """Return every value for a key, or an empty list."""
        return list(self._values.get(key, []))


def query_params(event: Mapping[str, Any]) -> QueryParams:
    """Collect query parameters from an API Gateway event.

    Handles both single and multi-value query string parameters. A value
    repeated in both places is only kept once.

    Args:
        event: The API Gateway event dictionary.

    Returns:
        A ``QueryParams`` mapping of parameter names to values.
    """
    params: dict[str, list[str]] = {}
    single = event.get("queryStringParameters") or {}
    multi = event.get("multiValueQueryStringParameters") or {}

    for key, values in multi.items():
        if not values:
            continue
        for value in values:
            if value is None:
                continue
            params.setdefault(key, []).append(value)

    for key, value in single.items():
        if value is None or key in params:
            continue
        params[key] = [value]

    return QueryParams(params)


def route_params(event: Mapping[str, Any]) -> dict[str, str]:
    """Return the path parameters of an API Gateway event.

    A declared but empty path segment is kept as an empty string so that
    readers can tell it apart from an absent key.
    """
    params = event.get("pathParameters") or {}
    return {key: "" if value is None else value for key, value in params.items()}


def read_string(source: ParamSource, key: str, default: str = "") -> ParamResult[str]:
    """Read a string parameter, falling back to the default when empty."""
    if key not in source:
        return ParamResult(default, False)
    value = source.get(key)
    if not value:
        return ParamResult(default, True)
    return ParamResult(value, True)


def read_bool(source: ParamSource, key: str, default: bool = False) -> ParamResult[bool]:
    """Read a boolean parameter.

    Recognises ``true, t, y, 1`` and ``false, f, n, 0`` (case-sensitive).
    Any other non-empty value returns the default without an error.
    """
    if key not in source:
        return ParamResult(default, False)
    value = source.get(key)
    if value in TRUE_VALUES:
        return ParamResult(True, True)
    if value in FALSE_VALUES:
        return ParamResult(False, True)
    return ParamResult(default, True)


def read_csv(
    source: ParamSource,
    key: str,
    default: Optional[list[str]] = None,
) -> ParamResult[Optional[list[str]]]:
    """Read a comma-separated parameter into a list of strings.

    Items are not trimmed, so ``"a, b"`` yields ``["a", " b"]``.
    """
    if key not in source:
        return ParamResult(default, False)
    value = source.get(key)
    if not value:
        return ParamResult(default, True)
    return ParamResult(value.split(","), True)


def read_int(source: ParamSource, key: str, default: int = 0) -> ParamResult[int]:
    """Read a signed 64-bit integer parameter.

    Args:
        source: Route or query parameters.
        key: The parameter name.
        default: Returned when the key is absent, empty or malformed.

    Returns:
        The parsed value; the error is set when the value is not an integer.
    """
    if key not in source:
        return ParamResult(default, False)
    value = source.get(key)
    if not value:
        return ParamResult(default, True)
    parsed = _parse_int64(value)
    if parsed is None:
        return ParamResult(default, True, ParameterError("must be an integer value", key))
    return ParamResult(parsed, True)


def read_float(source: ParamSource, key: str, default: float = 0.0) -> ParamResult[float]:
    """Read a float parameter whose magnitude fits a 32-bit float."""
    if key not in source:
        return ParamResult(default, False)
    value = source.get(key)
    if not value:
        return ParamResult(default, True)
    if not _FLOAT_RE.fullmatch(value):
        return ParamResult(default, True, ParameterError("must be a float value", key))
    parsed = float(value)
    if math.isinf(parsed) and not _INF_RE.fullmatch(value):
        return ParamResult(default, True, ParameterError("must be a float value", key))
    try:
        struct.pack("f", parsed)
    except OverflowError:
        return ParamResult(default, True, ParameterError("must be a float value", key))
    return ParamResult(parsed, True)


def read_id(source: ParamSource, key: str = "id") -> ParamResult[int]:
    """Read a positive integer resource id from route parameters.

    An absent key yields 0. A declared value that is empty, malformed or
    below 1 is an error.
    """
    key = key or "id"
    if key not in source:
        return ParamResult(0, False)
    value = source.get(key)
    parsed = _parse_int64(value) if value else None
    if parsed is None or parsed < 1:
        return ParamResult(0, True, _invalid(key))
    return ParamResult(parsed, True)


def read_uuid(
    source: ParamSource,
    key: str = "id",
    default: Optional[UUID] = None,
) -> ParamResult[Optional[UUID]]:
    """Read a UUID parameter; a declared but empty value is an error."""
    key = key or "id"
    if key not in source:
        return ParamResult(default, False)
    value = source.get(key)
    if not value:
        return ParamResult(default, True, _invalid(key))
    parsed = _parse_uuid(value)
    if parsed is None:
        return ParamResult(default, True, _invalid(key))
    return ParamResult(parsed, True)


def read_optional_uuid(
    source: ParamSource,
    key: str = "id",
    default: Optional[UUID] = None,
) -> ParamResult[Optional[UUID]]:
    """Read a UUID parameter that may be declared but left empty."""
    key = key or "id"
    if key in source and not source.get(key):
        return ParamResult(default, True)
    return read_uuid(source, key, default)


def read_null_uuid(
    source: ParamSource,
    key: str = "id",
    default: Optional[UUID] = None,
) -> ParamResult[Optional[UUID]]:
    """Read a nullable UUID parameter.

    ``None`` is the null state: it is what an absent key yields unless a
    default is supplied. Present values must be valid UUIDs.
    """
    return read_uuid(source, key, default)


def _parse_int64(value: str) -> Optional[int]:
    """Parse a signed 64-bit integer, returning None when it is malformed."""
    if not _INT_RE.fullmatch(value):
        return None
    # int64 never has more than 19 significant digits
    if len(value.lstrip("+-").lstrip("0")) > 19:
        return None
    parsed = int(value)
    if not INT64_MIN <= parsed <= INT64_MAX:
        return None
    return parsed


def _parse_uuid(value: str) -> Optional[UUID]:
    """Parse a UUID string, returning None when it is malformed."""
    if not _UUID_RE.fullmatch(value):
        return None
    try:
        return UUID(value)
    except (ValueError, TypeError):
        return None


def _invalid(key: str) -> ParameterError:
    return ParameterError(f"invalid {key} parameter", key)
