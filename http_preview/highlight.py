"""Syntax highlighting dispatch.

Maps a Content-Type to a Pygments lexer and renders inline HTML markup,
falling back to lexer guessing when the content type is unknown.
"""

from __future__ import annotations

from pygments import highlight as pygments_highlight
from pygments.filter import simplefilter
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name, guess_lexer
from pygments.token import Text, Whitespace
from pygments.util import ClassNotFound

from .constants import HTTP_LANGUAGE
from .mime import parse_mime

# Keep line counts intact: Pygments strips and appends newlines by default.
_LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}


@simplefilter
def _plain_whitespace(self, lexer, stream, options):
    # Emit whitespace tokens unstyled so indentation stays outside any span.
    for ttype, value in stream:
        yield (Text if ttype in Whitespace else ttype), value


def language_alias(content_type: str | None) -> str | None:
    """Resolve the highlighting language for a Content-Type.

    Args:
        content_type: Declared Content-Type, or None.

    Returns:
        str | None: ``"json"``, ``"javascript"``, ``"xml"`` or ``"html"``, or
            None when the type has no dedicated grammar.

    Examples:
        language_alias("application/problem+json")  # "json"
        language_alias("text/plain")  # None
    """
    if not content_type:
        return None

    mime = parse_mime(content_type.lower())
    if mime.type == "application/json" or mime.suffix == "+json":
        return "json"
    if mime.type == "application/javascript":
        return "javascript"
    if mime.type in ("application/xml", "text/xml") or mime.suffix == "+xml":
        return "xml"
    if mime.type == "text/html":
        return "html"
    return None


def highlight(text: str, content_type: str | None = None) -> str:
    """Highlight `text` using the grammar implied by `content_type`.

    Unknown or missing content types fall back to lexer guessing, and to plain
    escaped text when nothing matches.
    """
    alias = language_alias(content_type)
    if alias is not None:
        return highlight_as(text, alias)
    return _render(text, _guess_lexer(text))


def highlight_as(text: str, alias: str) -> str:
    """Highlight `text` with the Pygments lexer registered under `alias`."""
    try:
        lexer = get_lexer_by_name(alias, **_LEXER_OPTIONS)
    except ClassNotFound:
        lexer = TextLexer(**_LEXER_OPTIONS)
    return _render(text, lexer)


def highlight_http(text: str) -> str:
    """Highlight a request line or status line followed by headers."""
    return highlight_as(text, HTTP_LANGUAGE)


def _guess_lexer(text: str) -> Lexer:
    if not text.strip():
        return TextLexer(**_LEXER_OPTIONS)
    try:
        return guess_lexer(text, **_LEXER_OPTIONS)
    except ClassNotFound:
        return TextLexer(**_LEXER_OPTIONS)


def _render(text: str, lexer: Lexer) -> str:
    if not text:
        return ""
    lexer.add_filter(_plain_whitespace())
    return pygments_highlight(text, lexer, HtmlFormatter(nowrap=True))
