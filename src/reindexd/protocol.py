"""Wire format: one JSON object each way.

Request:  {"Type": "ping" | "reindex" | ..., "Index": "<name>"}
Response: {"Message": "<text>", "Error": "<text>"}

Field names are matched case-insensitively and missing fields default to the
empty string, so {"type": "ping"} is a valid ping. A null field is treated as
missing.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from reindexd.config.constants import (
    DECODE_ERROR_PREFIX,
    REINDEX_ERROR_PREFIX,
    RESPONSE_OK,
    RESPONSE_PONG,
    UNKNOWN_REQUEST_PREFIX,
)
from reindexd.core.errors import DecodeError


class Request(BaseModel):
    """Client request."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    kind: str = Field(default="", alias="Type")
    index: str = Field(default="", alias="Index")


class Response(BaseModel):
    """Server response. Exactly one of message/error is meaningful."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    message: str = Field(default="", alias="Message")
    error: str = Field(default="", alias="Error")

    @property
    def ok(self) -> bool:
        return not self.error

    @classmethod
    def pong(cls) -> Response:
        return cls(message=RESPONSE_PONG)

    @classmethod
    def reindexed(cls) -> Response:
        return cls(message=RESPONSE_OK)

    @classmethod
    def decode_failed(cls, detail: str) -> Response:
        return cls(error=DECODE_ERROR_PREFIX + detail)

    @classmethod
    def reindex_failed(cls, detail: str) -> Response:
        return cls(error=REINDEX_ERROR_PREFIX + detail)

    @classmethod
    def unknown(cls, kind: str) -> Response:
        return cls(error=UNKNOWN_REQUEST_PREFIX + kind)


_REQUEST_KEYS = {"type": "Type", "index": "Index"}
_RESPONSE_KEYS = {"message": "Message", "error": "Error"}


def _canonical_keys(data: dict[str, Any], names: dict[str, str]) -> dict[str, Any]:
    """Map keys onto canonical aliases ignoring case.

    Unknown keys are dropped, and a null value leaves the field at its default.
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        alias = names.get(key.lower()) if isinstance(key, str) else None
        if alias is not None and value is not None:
            result[alias] = value
    return result


def _load_object(payload: bytes | str) -> dict[str, Any]:
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError.malformed(f"invalid UTF-8: {e.reason}") from e
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise DecodeError.malformed(str(e)) from e
    if not isinstance(data, dict):
        raise DecodeError.malformed(f"expected a JSON object, got {type(data).__name__}")
    return data


def _validation_detail(e: ValidationError) -> str:
    err = e.errors()[0]
    field = ".".join(str(loc) for loc in err["loc"])
    return f"{field}: {err['msg']}"


def decode_request(payload: bytes | str) -> Request:
    """Parse a request payload.

    Raises:
        DecodeError: Not UTF-8, not JSON, not an object, or a field is not a string.
    """
    data = _canonical_keys(_load_object(payload), _REQUEST_KEYS)
    try:
        return Request.model_validate(data)
    except ValidationError as e:
        raise DecodeError.malformed(_validation_detail(e)) from e


def decode_response(payload: bytes | str) -> Response:
    """Parse a response payload (client side)."""
    data = _canonical_keys(_load_object(payload), _RESPONSE_KEYS)
    try:
        return Response.model_validate(data)
    except ValidationError as e:
        raise DecodeError.malformed(_validation_detail(e)) from e


def encode_request(request: Request) -> bytes:
    return request.model_dump_json(by_alias=True).encode("utf-8")


def encode_response(response: Response) -> bytes:
    return response.model_dump_json(by_alias=True).encode("utf-8")
