"""Literal URL to hyperlink rewriting for rendered markup."""

from __future__ import annotations

import html

from linkify_it import LinkifyIt

from .markup import tokenize
from .models import TokenKind

_LINK_SCHEMAS = ("http:", "https:", "ftp:")


def _build_linkifier() -> LinkifyIt:
    return LinkifyIt(options={"fuzzy_link": True, "fuzzy_email": False, "fuzzy_ip": False})


def _keep(match) -> bool:
    # Explicit schemes and www. hosts only; bare domains and mailto: are skipped.
    schema = match.schema.lower()
    if schema:
        return schema in _LINK_SCHEMAS
    return match.raw.lower().startswith("www.")


def add_url_links(markup: str) -> str:
    """Turn literal URLs in the text of `markup` into anchors.

    Only character data between tags is rewritten; attribute values and the
    content of existing ``<a>`` elements are left alone. Link text is kept
    exactly as written.

    Examples:
        add_url_links("see https://example.com")
        # 'see <a href="https://example.com">https://example.com</a>'
    """
    linkifier = _build_linkifier()
    out: list[str] = []
    anchor_depth = 0

    for token in tokenize(markup):
        if token.kind is TokenKind.OPEN_TAG and token.name == "a":
            anchor_depth += 1
        elif token.kind is TokenKind.CLOSE_TAG and token.name == "a":
            anchor_depth = max(anchor_depth - 1, 0)
        elif token.kind is TokenKind.TEXT and not anchor_depth:
            out.append(_link_text(token.text, linkifier))
            continue
        out.append(token.text)

    return "".join(out)


def _link_text(escaped: str, linkifier: LinkifyIt) -> str:
    text = html.unescape(escaped)
    matches = [match for match in linkifier.match(text) or [] if _keep(match)]
    if not matches:
        return escaped

    parts = []
    position = 0
    for match in matches:
        parts.append(html.escape(text[position : match.index], quote=False))
        parts.append(
            f'<a href="{html.escape(match.url)}">{html.escape(match.text, quote=False)}</a>'
        )
        position = match.last_index
    parts.append(html.escape(text[position:], quote=False))
    return "".join(parts)
