"""Body pretty-printing by content type."""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from xml.dom import minidom
from xml.parsers.expat import ExpatError

from .mime import is_json, is_xml

# A JSON string, a structural character, or a bare literal (number, true, false, null)
_JSON_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"|[{}\[\],:]|[^\s{}\[\],:"]+')
_JSON_INDENT = "  "


def format_body(
    body: str,
    content_type: str | None,
    suppress_validation_warning: bool = False,
    warn: Callable[[str], None] | None = None,
) -> str:
    """Pretty-print a body according to its declared content type.

    JSON bodies are re-indented with two spaces, keeping every literal as
    written, and XML bodies are pretty-printed. A body that does not parse as
    its declared type is returned unchanged.

    Args:
        body: Body text to format.
        content_type: Declared Content-Type, or None.
        suppress_validation_warning: Do not report bodies that fail to parse.
        warn: Optional callback for the validation warning.

    Returns:
        str: Formatted body, or `body` itself when no formatting applies.

    Examples:
        format_body('{"a":1}', "application/json")  # '{\\n  "a": 1\\n}'
    """
    if not body or not content_type:
        return body

    if is_json(content_type):
        try:
            json.loads(body)
        except ValueError:
            _report(content_type, "JSON", suppress_validation_warning, warn)
            return body
        return _reindent_json(body)

    if is_xml(content_type):
        try:
            return _pretty_xml(body)
        except ExpatError:
            _report(content_type, "XML", suppress_validation_warning, warn)
            return body

    return body


def _reindent_json(body: str) -> str:
    out: list[str] = []
    depth = 0
    previous = None

    for token in _JSON_TOKEN.findall(body):
        if token in ("}", "]"):
            depth -= 1
            if previous not in ("{", "["):
                out.append("\n" + _JSON_INDENT * depth)
        elif previous in ("{", "[", ","):
            out.append("\n" + _JSON_INDENT * depth)

        out.append(": " if token == ":" else token)
        if token in ("{", "["):
            depth += 1
        previous = token

    return "".join(out)


def _pretty_xml(body: str) -> str:
    document = minidom.parseString(body)
    stripped = body.lstrip()
    if stripped.startswith("<?xml"):
        declaration = stripped[: stripped.index("?>") + 2]
        pretty = declaration + "\n" + document.documentElement.toprettyxml(indent="  ")
    else:
        pretty = document.documentElement.toprettyxml(indent="  ")

    # minidom keeps whitespace-only text nodes of already indented documents
    lines = [line for line in pretty.splitlines() if line.strip()]
    return "\n".join(lines)


def _report(
    content_type: str,
    kind: str,
    suppress_validation_warning: bool,
    warn: Callable[[str], None] | None,
) -> None:
    if suppress_validation_warning or warn is None:
        return
    warn(
        f"Warning: The content type of response is {content_type}, "
        f"while response body is not a valid {kind} string"
    )
