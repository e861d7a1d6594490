"""Data models for http-preview."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

from .exceptions import InvalidHeaderError


class PreviewOption(Enum):
    """Parts of an exchange shown in the preview.

    Attributes:
        EXCHANGE: Request echo, response headers and response body.
        HEADERS: Response status line and headers only.
        BODY: Response body only.
        DEFAULT: Response status line, headers and body.
    """

    EXCHANGE = "exchange"
    HEADERS = "headers"
    BODY = "body"
    DEFAULT = "default"


class Headers(Mapping[str, str]):
    """Read-only, insertion-ordered header mapping with case-insensitive lookup.

    Values are validated once on construction: strings are kept, lists and
    tuples of strings are joined with ``", "``, numbers are converted with
    `str`, and anything else raises `InvalidHeaderError`.
    """

    def __init__(self, raw: Mapping[str, object] | None = None):
        self._items: dict[str, str] = {}
        self._index: dict[str, str] = {}
        for name, value in (raw or {}).items():
            name = str(name)
            self._items[name] = _coerce_header_value(name, value)
            self._index[name.lower()] = name

    def __getitem__(self, name: str) -> str:
        return self._items[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"

    def get_header(self, name: str) -> str | None:
        key = self._index.get(name.lower())
        return None if key is None else self._items[key]


def _coerce_header_value(name: str, value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return ", ".join(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise InvalidHeaderError(name, value)


def _as_headers(value: Mapping[str, object] | None) -> Headers:
    return value if isinstance(value, Headers) else Headers(value)


@dataclass(frozen=True)
class FileReference:
    """Request body that lives in a file and is never shown inline."""

    path: Path


@dataclass(frozen=True)
class Request:
    """Request half of an exchange.

    Attributes:
        method: HTTP method, such as ``"GET"``.
        url: Request target URL.
        headers: Request headers; plain mappings are validated into `Headers`.
        body: Inline text body, a `FileReference`, or None when absent.
    """

    method: str
    url: str
    headers: Headers = field(default_factory=Headers)
    body: str | FileReference | None = None

    def __post_init__(self):
        object.__setattr__(self, "headers", _as_headers(self.headers))

    def get_header(self, name: str) -> str | None:
        return self.headers.get_header(name)


@dataclass(frozen=True)
class Response:
    """Response half of an exchange.

    Attributes:
        http_version: Protocol version without the ``HTTP/`` prefix.
        status_code: Numeric status code.
        status_message: Reason phrase.
        headers: Response headers; plain mappings are validated into `Headers`.
        body: Decoded body text.
        raw_body: Body bytes as received; derived from `body` when omitted.
        body_size_in_bytes: Size of the received body; defaults to the length
            of `raw_body`.
    """

    http_version: str
    status_code: int
    status_message: str
    headers: Headers = field(default_factory=Headers)
    body: str = ""
    raw_body: bytes | None = None
    body_size_in_bytes: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "headers", _as_headers(self.headers))
        if self.raw_body is None:
            object.__setattr__(self, "raw_body", self.body.encode("utf-8"))
        if self.body_size_in_bytes is None:
            object.__setattr__(self, "body_size_in_bytes", len(self.raw_body))

    def get_header(self, name: str) -> str | None:
        return self.headers.get_header(name)


@dataclass(frozen=True)
class Exchange:
    """One HTTP transaction: the request and the response it produced."""

    request: Request
    response: Response


class TokenKind(Enum):
    """Kinds of events produced by the markup tokenizer.

    Attributes:
        OPEN_TAG: Start tag of an inline element.
        CLOSE_TAG: End tag of an inline element.
        NEWLINE: ``\\r\\n``, ``\\r`` or ``\\n``.
        TEXT: Character data between tags.
        OTHER: Self-closing or void tags, handled like text.
    """

    OPEN_TAG = auto()
    CLOSE_TAG = auto()
    NEWLINE = auto()
    TEXT = auto()
    OTHER = auto()


@dataclass(frozen=True)
class MarkupToken:
    """A single tokenizer event.

    Attributes:
        kind: Event kind.
        text: Exact source text of the token.
        name: Lower-cased element name for tag tokens, otherwise None.
    """

    kind: TokenKind
    text: str
    name: str | None = None


@dataclass(frozen=True)
class Line:
    """A display line of rebalanced markup.

    Attributes:
        number: One-based display number.
        content: Markup whose tags all open and close within the line.
    """

    number: int
    content: str


@dataclass(frozen=True)
class FoldingRange:
    """A foldable block.

    Attributes:
        start: One-based number of the line that opens the block.
        end: Zero-based index of the first line that dedents below the block.
    """

    start: int
    end: int
