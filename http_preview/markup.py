"""Line splitting for highlighted markup.

Highlighters may emit an inline element that opens on one line and closes
several lines later (multi-line strings, comments). Splitting such markup on
newlines would leave a dangling start tag on one line and an orphaned end tag
on another. `rebalance` closes every open element before each newline and
reopens it after, so `split_lines` can cut on newlines and get lines that are
each well-formed on their own.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from .models import Line, MarkupToken, TokenKind

_TOKEN_PATTERN = re.compile(
    r"(?P<tag><(?P<close>/)?(?P<name>[A-Za-z][\w:-]*)(?P<attrs>[^>]*)>)"
    r"|(?P<newline>\r\n|\r|\n)"
)
_NEWLINE_PATTERN = re.compile(r"\r\n|\r|\n")
# An end tag that starts a line, optionally after indentation
_LEADING_CLOSE_PATTERN = re.compile(r"([\r\n]\s*)(</span>)", re.IGNORECASE)

_VOID_ELEMENTS = frozenset({"br", "hr", "img", "input", "link", "meta", "wbr"})


def tokenize(markup: str) -> Iterator[MarkupToken]:
    """Yield open-tag, close-tag, newline, text and other events in order.

    Self-closing tags and void elements are reported as `TokenKind.OTHER`.

    Examples:
        [t.kind for t in tokenize("<b>x</b>\\n")]
        # [OPEN_TAG, TEXT, CLOSE_TAG, NEWLINE]
    """
    position = 0
    for match in _TOKEN_PATTERN.finditer(markup):
        if match.start() > position:
            yield MarkupToken(TokenKind.TEXT, markup[position : match.start()])
        position = match.end()

        if match.group("newline") is not None:
            yield MarkupToken(TokenKind.NEWLINE, match.group("newline"))
            continue

        name = match.group("name").lower()
        text = match.group("tag")
        if match.group("close"):
            yield MarkupToken(TokenKind.CLOSE_TAG, text, name)
        elif name in _VOID_ELEMENTS or match.group("attrs").rstrip().endswith("/"):
            yield MarkupToken(TokenKind.OTHER, text, name)
        else:
            yield MarkupToken(TokenKind.OPEN_TAG, text, name)

    if position < len(markup):
        yield MarkupToken(TokenKind.TEXT, markup[position:])


def rebalance(markup: str) -> str:
    """Close and reopen inline elements around every newline they straddle.

    Single pass over the token stream with a stack of open tags. At a newline,
    the open elements are closed innermost first, the newline is emitted, and
    the original start tags are replayed outermost first.

    Args:
        markup: Well-nested markup, possibly with elements spanning newlines.

    Returns:
        str: Markup in which no element spans a newline.

    Examples:
        rebalance('<span class="s">"a\\nb"</span>')
        # '<span class="s">"a</span>\\n<span class="s">b"</span>'
    """
    open_tags: list[MarkupToken] = []
    out: list[str] = []

    for token in tokenize(markup):
        if token.kind is TokenKind.OPEN_TAG:
            open_tags.append(token)
            out.append(token.text)
        elif token.kind is TokenKind.CLOSE_TAG:
            if open_tags:
                open_tags.pop()
            out.append(token.text)
        elif token.kind is TokenKind.NEWLINE and open_tags:
            out.extend(f"</{tag.name}>" for tag in reversed(open_tags))
            out.append(token.text)
            out.extend(tag.text for tag in open_tags)
        else:
            out.append(token.text)

    return "".join(out)


def split_lines(markup: str) -> list[Line]:
    """Split highlighted markup into independently well-formed display lines.

    End tags that begin a line are first moved in front of the preceding
    newline, so a block's closing element does not spill onto the next line.

    Args:
        markup: Highlighted markup.

    Returns:
        list[Line]: One line per newline-delimited segment, numbered from 1.

    Examples:
        [line.content for line in split_lines("<b>a\\nb</b>")]
        # ["<b>a</b>", "<b>b</b>"]
    """
    markup = _LEADING_CLOSE_PATTERN.sub(r"\2\1", markup)
    markup = rebalance(markup)
    return [
        Line(number=index + 1, content=content)
        for index, content in enumerate(_NEWLINE_PATTERN.split(markup))
    ]
