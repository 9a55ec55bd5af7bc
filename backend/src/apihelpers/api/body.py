"""Strict JSON request body decoding.

Bodies are read up to a size limit, must hold exactly one JSON value and
are validated into a pydantic model (or any type pydantic can adapt)
without cross-type coercion. Unknown keys are rejected at every depth.
Every client-side failure surfaces as a ``RequestBodyError`` whose
message can be returned to the caller unchanged.
"""

from __future__ import annotations

import base64
import binascii
import copy
import json
import re
import types
from functools import lru_cache
from typing import Annotated
from typing import Any
from typing import BinaryIO
from typing import Mapping
from typing import Optional
from typing import Union
from typing import get_args
from typing import get_origin

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import PydanticUserError
from pydantic import RootModel
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from apihelpers.exceptions import BodyTooLargeError
from apihelpers.exceptions import RequestBodyError
from apihelpers.utils.logging import bind_event_context
from apihelpers.utils.logging import get_logger

logger = get_logger(__name__)

MAX_BODY_BYTES = 1_048_576

JSON_WHITESPACE = " \t\n\r"

Body = Union[str, bytes, bytearray, memoryview, BinaryIO, None]

# Errors that mean "the JSON value had the wrong type" rather than
# "the value had the right type but failed a constraint".
_TYPE_ERROR_SUFFIXES = ("_type", "_parsing")
_TYPE_ERRORS = frozenset({"int_from_float", "is_instance_of"})

_LITERALS = ("true", "false", "null")

# String tokens are matched so that constants inside them are skipped.
_CONSTANT_RE = re.compile(r'"(?:[^"\\]|\\.)*"|-?Infinity|NaN', re.DOTALL)


class _InvalidConstant(ValueError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name


def _reject_constant(name: str) -> Any:
    raise _InvalidConstant(name)


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def read_json(body: Body, dst: Any, max_bytes: int = MAX_BODY_BYTES) -> Any:
    """Decode a JSON request body into ``dst``.

    Args:
        body: Raw body as text, bytes or a binary stream. At most
            ``max_bytes + 1`` bytes are read from a stream.
        dst: Destination type, usually a pydantic model class.
        max_bytes: Largest accepted body size in bytes.

    Returns:
        The validated value, an instance of ``dst`` for model classes.

    Raises:
        RequestBodyError: If the body is empty, malformed, oversized or
            does not match ``dst``.
        TypeError: If ``dst`` is not something a body can be decoded into.
    """
    adapter = _adapter_for(dst)
    try:
        return _decode(adapter, _read_limited(body, max_bytes))
    except RequestBodyError as exc:
        logger.debug("Rejected request body", extra={"reason": exc.message})
        raise


def read_json_event(
    event: Mapping[str, Any],
    dst: Any,
    max_bytes: int = MAX_BODY_BYTES,
) -> Any:
    """Decode the JSON body of an API Gateway event into ``dst``.

    Base64-encoded bodies are decoded first. The event's request id is
    bound to the logging context so rejections can be traced.
    """
    bind_event_context(event)
    raw = event.get("body") or ""
    if event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise RequestBodyError("body contains badly-formed JSON") from exc
    return read_json(raw, dst, max_bytes=max_bytes)


@lru_cache(maxsize=None)
def _adapter_for(dst: Any) -> TypeAdapter:
    """Build (and cache) the validator for a decode destination."""
    if dst is None or (
        dst is not Any and not isinstance(dst, type) and get_origin(dst) is None
    ):
        raise TypeError(f"cannot decode JSON into non-type {dst!r}")
    try:
        return TypeAdapter(_forbid_extra(dst, {}))
    except PydanticUserError as exc:
        raise TypeError(f"cannot decode JSON into {dst!r}") from exc


def _forbid_extra(tp: Any, seen: dict[type, type]) -> Any:
    """Return ``tp`` with every model inside it rejecting unknown keys.

    Models are replaced by subclasses of themselves, so validated values
    are still instances of the original classes.
    """
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        return _forbid_extra_model(tp, seen)

    args = get_args(tp)
    origin = get_origin(tp)
    if origin is None or not args:
        return tp
    new_args = tuple(_forbid_extra(arg, seen) for arg in args)
    if all(new is old for new, old in zip(new_args, args)):
        return tp
    if origin in (Union, types.UnionType):
        return Union[new_args]
    if origin is Annotated:
        return Annotated[new_args]
    try:
        return origin[new_args]
    except TypeError:
        return tp


def _forbid_extra_model(model: type[BaseModel], seen: dict[type, type]) -> type[BaseModel]:
    if model in seen:
        return seen[model]
    # Self-referencing models see the original class at the inner level.
    seen[model] = model

    overrides: dict[str, tuple[Any, Any]] = {}
    for name, field in model.model_fields.items():
        annotation = _forbid_extra(field.annotation, seen)
        if annotation is not field.annotation:
            overrides[name] = (annotation, field)

    # RootModel has no keys of its own and rejects an ``extra`` setting.
    needs_config = (
        not issubclass(model, RootModel) and model.model_config.get("extra") != "forbid"
    )
    if not overrides and not needs_config:
        return model

    namespace: dict[str, Any] = {
        "__module__": model.__module__,
        "__qualname__": model.__qualname__,
        "__annotations__": {name: ann for name, (ann, _) in overrides.items()},
    }
    for name, (_, field) in overrides.items():
        field = copy.copy(field)
        field.metadata = list(field.metadata)
        namespace[name] = field
    if needs_config:
        namespace["model_config"] = ConfigDict(extra="forbid")

    strict = type(model.__name__, (model,), namespace)
    seen[model] = strict
    return strict


def _read_limited(body: Body, max_bytes: int) -> bytes:
    """Read the body, failing once it is larger than ``max_bytes``."""
    if body is None:
        data = b""
    elif isinstance(body, str):
        data = body.encode("utf-8")
    elif isinstance(body, (bytes, bytearray, memoryview)):
        data = bytes(body)
    else:
        chunks: list[bytes] = []
        remaining = max_bytes + 1
        while remaining > 0:
            chunk = body.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)

    if len(data) > max_bytes:
        raise BodyTooLargeError(max_bytes)
    return data


def _decode(adapter: TypeAdapter, data: bytes) -> Any:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RequestBodyError("body contains badly-formed JSON") from exc

    start = len(text) - len(text.lstrip(JSON_WHITESPACE))
    if start == len(text):
        raise RequestBodyError("body must not be empty")

    try:
        _, end = _DECODER.raw_decode(text, start)
    except RecursionError as exc:
        raise RequestBodyError("body contains badly-formed JSON") from exc
    except _InvalidConstant as exc:
        offset = _byte_offset(text, _constant_position(text, start)) + 1
        raise RequestBodyError(
            f"body contains badly-formed JSON (at character {offset})"
        ) from exc
    except json.JSONDecodeError as exc:
        if _is_truncated(exc, text):
            raise RequestBodyError("body contains badly-formed JSON") from exc
        offset = _byte_offset(text, exc.pos) + 1
        raise RequestBodyError(
            f"body contains badly-formed JSON (at character {offset})"
        ) from exc

    if text[end:].strip(JSON_WHITESPACE):
        raise RequestBodyError("body must only contain a single JSON value")

    try:
        return adapter.validate_json(text[start:end], strict=True)
    except PydanticValidationError as exc:
        raise _translate(exc, _byte_offset(text, end)) from exc


def _is_truncated(exc: json.JSONDecodeError, text: str) -> bool:
    """Return True when decoding failed because the input ran out."""
    if exc.msg.startswith("Unterminated string"):
        return True
    rest = text[exc.pos:].rstrip(JSON_WHITESPACE)
    if not rest:
        return True
    if exc.msg != "Expecting value":
        return False
    return rest in ("-", "+") or any(
        literal.startswith(rest) and literal != rest for literal in _LITERALS
    )


def _constant_position(text: str, start: int) -> int:
    """Position of the first NaN/Infinity literal outside string values."""
    for match in _CONSTANT_RE.finditer(text, start):
        if not match.group().startswith('"'):
            return match.start()
    return start


def _byte_offset(text: str, pos: int) -> int:
    return len(text[:pos].encode("utf-8"))


def _translate(exc: PydanticValidationError, end_offset: int) -> RequestBodyError:
    """Map the first pydantic error onto a client-facing message."""
    error = exc.errors(include_url=False)[0]
    loc = error.get("loc") or ()
    field: Optional[str] = ".".join(str(part) for part in loc) or None
    kind = error.get("type", "")

    if kind == "json_invalid":
        return RequestBodyError("body contains badly-formed JSON")
    if kind == "extra_forbidden":
        return RequestBodyError(f'body contains unknown key "{loc[-1]}"', field=field)
    if kind == "missing":
        return RequestBodyError(f'body is missing required field "{field}"', field=field)
    if kind in _TYPE_ERRORS or kind.endswith(_TYPE_ERROR_SUFFIXES):
        if field:
            return RequestBodyError(
                f'body contains incorrect JSON type for field "{field}"',
                field=field,
            )
        return RequestBodyError(
            f"body contains incorrect JSON type (at character {end_offset})"
        )
    if field:
        return RequestBodyError(
            f'body contains invalid value for field "{field}"', field=field
        )
    return RequestBodyError("body contains invalid JSON value")
