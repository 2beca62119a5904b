"""Strict JSON request body decoding.

A body is accepted only when it is exactly one JSON object whose fields are
all known to the target model and carry the right JSON types. Every other
shape maps to a distinct DecodeError subclass so clients learn precisely what
was wrong.

Checks run in this order:

1. declared Content-Type must be application/json
2. body must fit within ``max_bytes``
3. body must not be empty
4. first JSON value must be well formed (offset reported) and complete
5. first value must be an object with known, correctly typed fields; when
   several fields are wrong the one appearing first in the body wins
6. nothing but whitespace may follow the first value
"""

import json
from json.decoder import scanstring
from typing import Any, TypeVar

import orjson
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

from paste_server.exceptions import (
    EmptyBodyError,
    EntityTooLargeError,
    InvalidFieldTypeError,
    MalformedJSONError,
    MultipleObjectsError,
    TruncatedJSONError,
    UnknownFieldError,
    UnsupportedMediaTypeError,
)


__all__ = ["JSON_MEDIA_TYPE", "RequestDecoder", "check_content_type"]


JSON_MEDIA_TYPE = "application/json"
JSON_WHITESPACE = " \t\n\r"
_SCALAR_END = ",]}" + JSON_WHITESPACE

ModelT = TypeVar("ModelT", bound=BaseModel)

_scanner = json.JSONDecoder()


def check_content_type(content_type: str | None) -> None:
    """Reject a declared media type other than application/json.

    Parameters such as ``charset`` are ignored. An absent header is allowed.
    """
    if not content_type:
        return
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != JSON_MEDIA_TYPE:
        raise UnsupportedMediaTypeError()


class RequestDecoder:
    """Decode size-capped request bodies into strict Pydantic models."""

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes

    async def decode_request(self, request: Request, schema: type[ModelT]) -> ModelT:
        """Read the request stream and decode it into ``schema``."""
        check_content_type(request.headers.get("content-type"))
        raw = await self.read_body(request)
        return self._decode(raw, schema)

    def decode(
        self,
        raw: bytes,
        schema: type[ModelT],
        content_type: str | None = None,
    ) -> ModelT:
        """Decode an already-read body into ``schema``."""
        check_content_type(content_type)
        if len(raw) > self.max_bytes:
            raise EntityTooLargeError(self.max_bytes)
        return self._decode(raw, schema)

    async def read_body(self, request: Request) -> bytes:
        """Read at most ``max_bytes`` from the request stream.

        Raises:
            EntityTooLargeError: declared or streamed length exceeds the cap
        """
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_bytes:
            raise EntityTooLargeError(self.max_bytes)

        body = bytearray()
        async for chunk in request.stream():
            body.extend(chunk)
            if len(body) > self.max_bytes:
                raise EntityTooLargeError(self.max_bytes)
        return bytes(body)

    def _decode(self, raw: bytes, schema: type[ModelT]) -> ModelT:
        if not raw.strip(JSON_WHITESPACE.encode()):
            raise EmptyBodyError()

        text, value, has_trailing_data = _parse_first_value(raw)
        model = _validate(text, value, schema)

        if has_trailing_data:
            raise MultipleObjectsError()
        return model


def _parse_first_value(raw: bytes) -> tuple[str, Any, bool]:
    """Parse the first JSON value in ``raw``.

    Returns:
        Tuple of (decoded text, parsed value, whether data follows the value)

    """
    try:
        value = orjson.loads(raw)
    except orjson.JSONDecodeError as fast_error:
        fast_error_pos = fast_error.pos
    else:
        return raw.decode("utf-8"), value, False

    # Slow path: find out whether the first value is complete and followed by
    # more data, or broken, and where.
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedJSONError(e.start) from e

    start = _skip_whitespace(text, 0)
    try:
        value, end = _scanner.raw_decode(text, start)
    except json.JSONDecodeError as e:
        ends_early = _skip_whitespace(text, e.pos) >= len(text)
        if ends_early or e.msg.startswith("Unterminated string"):
            raise TruncatedJSONError() from e
        raise MalformedJSONError(_byte_offset(text, e.pos)) from e
    except RecursionError as e:
        # Nested deeper than either parser accepts
        raise MalformedJSONError(_byte_offset(text, fast_error_pos)) from e

    if _skip_whitespace(text, end) < len(text):
        return text, value, True

    # The stdlib scanner accepts a few literals (NaN, Infinity) orjson rejects
    raise MalformedJSONError(_byte_offset(text, fast_error_pos))


def _validate(text: str, value: Any, schema: type[ModelT]) -> ModelT:
    if not isinstance(value, dict):
        end = _skip_value(text, _skip_whitespace(text, 0))
        raise InvalidFieldTypeError(None, _byte_offset(text, end))

    try:
        return schema.model_validate(value)
    except PydanticValidationError as e:
        raise _first_field_error(text, e) from e


def _first_field_error(
    text: str, error: PydanticValidationError
) -> UnknownFieldError | InvalidFieldTypeError:
    """Pick the error whose key appears earliest in the body."""
    members = _object_members(text)
    candidates: list[tuple[int, UnknownFieldError | InvalidFieldTypeError]] = []

    for detail in error.errors():
        loc = detail.get("loc") or ("",)
        field = str(loc[0])
        key_start, value_end = members.get(field, (len(text), len(text)))
        if detail["type"] == "extra_forbidden":
            candidates.append((key_start, UnknownFieldError(field)))
        else:
            candidates.append(
                (key_start, InvalidFieldTypeError(field, _byte_offset(text, value_end)))
            )

    candidates.sort(key=lambda candidate: candidate[0])
    return candidates[0][1]


def _object_members(text: str) -> dict[str, tuple[int, int]]:
    """Map each top-level key of the object at the start of ``text``.

    Only called on text whose first value already parsed as an object.

    Returns:
        Dictionary of key -> (offset of its first occurrence, end of its last value)

    """
    members: dict[str, tuple[int, int]] = {}
    index = _skip_whitespace(text, 0) + 1  # past "{"
    index = _skip_whitespace(text, index)
    if text[index] == "}":
        return members

    while True:
        index = _skip_whitespace(text, index)
        key_start = index
        key, index = scanstring(text, index + 1)
        index = _skip_whitespace(text, index) + 1  # past ":"
        index = _skip_value(text, _skip_whitespace(text, index))

        first_start = members[key][0] if key in members else key_start
        members[key] = (first_start, index)

        index = _skip_whitespace(text, index)
        if text[index] != ",":
            return members
        index += 1


def _skip_value(text: str, index: int) -> int:
    """End index of the well-formed JSON value starting at ``index``.

    Iterative, so nesting depth is bounded only by the body size.
    """
    depth = 0
    while True:
        char = text[index]
        if char == '"':
            _, index = scanstring(text, index + 1)
        elif char in "[{":
            depth += 1
            index += 1
        elif char in "]}":
            depth -= 1
            index += 1
        elif char in ",:" or char in JSON_WHITESPACE:
            index += 1
            continue
        else:
            while index < len(text) and text[index] not in _SCALAR_END:
                index += 1
        if depth == 0:
            return index


def _skip_whitespace(text: str, index: int) -> int:
    while index < len(text) and text[index] in JSON_WHITESPACE:
        index += 1
    return index


def _byte_offset(text: str, char_index: int) -> int:
    return len(text[:char_index].encode("utf-8"))
