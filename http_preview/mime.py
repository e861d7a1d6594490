"""Content-Type parsing helpers."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import SUPPORTED_IMAGE_FORMATS


@dataclass(frozen=True)
class MimeType:
    """Parsed Content-Type value.

    Attributes:
        type: Lower-cased ``type/subtype`` without the structured suffix.
        suffix: Structured syntax suffix including the ``+``, such as
            ``"+json"``, or None.
        charset: Value of the ``charset`` parameter, or None.
    """

    type: str
    suffix: str | None = None
    charset: str | None = None


def parse_mime(content_type: str) -> MimeType:
    """Split a Content-Type header into media type, suffix and charset.

    Examples:
        parse_mime("application/vnd.api+json; charset=utf-8")
        # MimeType(type="application/vnd.api", suffix="+json", charset="utf-8")
    """
    essence, *params = content_type.split(";")
    media_type, _, suffix = essence.strip().partition("+")

    charset = None
    for param in params:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            charset = value.strip().strip('"') or None

    return MimeType(
        type=media_type.lower(),
        suffix=f"+{suffix.lower()}" if suffix else None,
        charset=charset,
    )


def is_json(content_type: str | None) -> bool:
    if not content_type:
        return False
    mime = parse_mime(content_type)
    return mime.type in ("application/json", "text/json") or mime.suffix == "+json"


def is_xml(content_type: str | None) -> bool:
    if not content_type:
        return False
    mime = parse_mime(content_type)
    return mime.type in ("application/xml", "text/xml") or mime.suffix == "+xml"


def is_browser_supported_image(content_type: str | None) -> bool:
    """Return True for image types a browser can render from a data URI."""
    if not content_type:
        return False
    return parse_mime(content_type).type in SUPPORTED_IMAGE_FORMATS
