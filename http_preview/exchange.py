"""Exchange file decoding."""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from pathlib import Path

from .config import ConfigError, PreviewConfig, validate_config
from .exceptions import ExchangeError, ExchangeFileError
from .filesystem import read_exchange_text
from .models import Exchange, FileReference, Request, Response


def parse_exchange(data: object) -> Exchange:
    """Build an `Exchange` from decoded JSON.

    Args:
        data: Mapping with ``request`` and ``response`` tables.

    Returns:
        Exchange: Validated exchange.

    Raises:
        ExchangeError: If a required field is missing or has the wrong type,
            or a header value is not representable as a string.

    Examples:
        parse_exchange({
            "request": {"method": "GET", "url": "https://example.com"},
            "response": {"http_version": "1.1", "status_code": 200, "status_message": "OK"},
        })
    """
    if not isinstance(data, Mapping):
        raise ExchangeError("Exchange must be a JSON object")

    return Exchange(
        request=_parse_request(_table(data, "request")),
        response=_parse_response(_table(data, "response")),
    )


def _table(data: Mapping, key: str) -> Mapping:
    value = data.get(key)
    if not isinstance(value, Mapping):
        raise ExchangeError(f"`{key}` must be an object")
    return value


def _field(table: Mapping, key: str, expected: type | tuple[type, ...], default=None):
    value = table.get(key)
    if value is None:
        if default is None:
            raise ExchangeError(f"Missing required field `{key}`")
        return default
    if isinstance(value, bool) or not isinstance(value, expected):
        raise ExchangeError(f"`{key}` has an unsupported type {type(value).__name__}")
    return value


def _headers(table: Mapping) -> Mapping:
    headers = table.get("headers") or {}
    if not isinstance(headers, Mapping):
        raise ExchangeError("`headers` must be an object")
    return headers


def _parse_request(table: Mapping) -> Request:
    raw_body = table.get("body")
    if raw_body is None or isinstance(raw_body, str):
        body = raw_body
    elif isinstance(raw_body, Mapping) and isinstance(raw_body.get("file"), str):
        body = FileReference(Path(raw_body["file"]))
    else:
        raise ExchangeError("Request `body` must be a string, a file reference, or null")

    return Request(
        method=_field(table, "method", str),
        url=_field(table, "url", str),
        headers=_headers(table),
        body=body,
    )


def _parse_response(table: Mapping) -> Response:
    body = _field(table, "body", str, default="")
    raw_body = None
    encoded = table.get("body_base64")
    if encoded is not None:
        if not isinstance(encoded, str):
            raise ExchangeError("`body_base64` must be a string")
        try:
            raw_body = base64.b64decode(encoded, validate=True)
        except binascii.Error as error:
            raise ExchangeError(f"`body_base64` is not valid base64: {error}") from error
        if not body:
            body = raw_body.decode("utf-8", errors="replace")

    body_size = table.get("body_size_in_bytes")
    if body_size is not None and (
        isinstance(body_size, bool) or not isinstance(body_size, int) or body_size < 0
    ):
        raise ExchangeError("`body_size_in_bytes` must be a non-negative integer")

    return Response(
        http_version=str(_field(table, "http_version", (str, int, float))),
        status_code=_field(table, "status_code", int),
        status_message=_field(table, "status_message", str, default=""),
        headers=_headers(table),
        body=body,
        raw_body=raw_body,
        body_size_in_bytes=body_size,
    )


def load_exchange(
    filepath: Path, config: PreviewConfig | None = None, max_size: int | None = None
) -> Exchange:
    """Read and decode an exchange file.

    Args:
        filepath: Path to the JSON exchange file.
        config: Configuration; validated before reading.
        max_size: Size limit in bytes; defaults to ``config.max_file_size``.

    Returns:
        Exchange: Decoded exchange.

    Raises:
        ExchangeFileError: If the configuration is invalid, or the file cannot be
            read, is too large, is not valid JSON, or does not describe a valid
            exchange.

    Examples:
        exchange = load_exchange(Path("exchange.json"))
    """
    config = config or PreviewConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise ExchangeFileError(str(error)) from error

    content = read_exchange_text(filepath, max_size or config.max_file_size)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as error:
        error_message = f"{filepath} is not valid JSON: {error}"
        raise ExchangeFileError(error_message) from error

    try:
        return parse_exchange(data)
    except ExchangeError as error:
        error_message = f"{filepath}: {error}"
        raise ExchangeFileError(error_message) from error
