"""Assembly of the final preview document."""

from __future__ import annotations

import base64
import html
from collections.abc import Callable, Mapping

from .annotate import add_line_numbers
from .config import PreviewConfig, is_large_response, normalize_config
from .constants import DEFAULT_GUTTER_WIDTH, REQUEST_BODY_PLACEHOLDER
from .formatting import format_body
from .highlight import highlight, highlight_http
from .linkify import add_url_links
from .mime import is_browser_supported_image
from .models import Exchange, PreviewOption


def format_headers(headers: Mapping[str, str]) -> str:
    """Render headers as ``name: value`` lines, each ending with a newline."""
    return "".join(f"{name}: {value}\n" for name, value in headers.items())


def compose_preview(
    exchange: Exchange,
    config: PreviewConfig,
    warn: Callable[[str], None] | None = None,
) -> str:
    """Highlight the parts of `exchange` selected by the preview option.

    Args:
        exchange: Exchange to render.
        config: Rendering configuration; a string `preview_option` is
            normalized first.
        warn: Optional callback for body validation warnings.

    Returns:
        str: Highlighted markup for the request echo, status line, headers and
            body, as selected by ``config.preview_option``.

    Raises:
        ConfigError: If `preview_option` names an unknown option.

    Examples:
        compose_preview(exchange, PreviewConfig(preview_option=PreviewOption.HEADERS))
    """
    config = normalize_config(config)
    request = exchange.request
    response = exchange.response
    option = config.preview_option
    code: list[str] = []

    if option is PreviewOption.EXCHANGE:
        request_head = (
            f"{request.method} {request.url} HTTP/1.1\n"
            f"{format_headers(request.headers)}"
        )
        code.append(highlight_http(request_head + "\r\n"))
        if request.body:
            request_content_type = request.get_header("content-type")
            body = request.body if isinstance(request.body, str) else REQUEST_BODY_PLACEHOLDER
            body = format_body(body, request_content_type, True)
            code.append(highlight(body, request_content_type))
            code.append("\r\n")

        code.append("\r\n" * 2)

    if option is not PreviewOption.BODY:
        status_head = (
            f"HTTP/{response.http_version} {response.status_code} {response.status_message}\n"
            f"{format_headers(response.headers)}"
        )
        if option is not PreviewOption.HEADERS:
            status_head += "\r\n"
        code.append(highlight_http(status_head))

    if option is not PreviewOption.HEADERS:
        response_content_type = response.get_header("content-type")
        body = format_body(
            response.body,
            response_content_type,
            config.suppress_response_body_content_type_validation_warning,
            warn,
        )
        if config.disable_highlight_response_body_for_large_response and is_large_response(
            response.body_size_in_bytes, config
        ):
            code.append(html.escape(body, quote=False))
        else:
            code.append(highlight(body, response_content_type))

    return "".join(code)


def render_style_overrides(config: PreviewConfig, width: int) -> str:
    """Build the ``<style>`` block for font settings and the line-number gutter."""
    return "\n".join(
        [
            "<style>",
            "code {",
            f"font-family: {config.font_family};" if config.font_family else "",
            f"font-size: {config.font_size}px;" if config.font_size else "",
            f"font-weight: {config.font_weight};" if config.font_weight else "",
            "}",
            "code .line {",
            f"padding-left: calc({width}ch + 20px );",
            "}",
            "code .line:before {",
            f"width: {width}ch;",
            f"margin-left: calc(-{width}ch + -30px );",
            "}",
            ".line .icon {",
            f"left: calc({width}ch + 3px)",
            "}",
            ".line.collapsed .icon {",
            f"left: calc({width}ch + 3px)",
            "}",
            "</style>",
        ]
    )


def render_body(
    exchange: Exchange,
    config: PreviewConfig,
    warn: Callable[[str], None] | None = None,
) -> tuple[str, int]:
    """Render the inner HTML of the document.

    Browser-displayable images are embedded as a data URI; everything else is
    highlighted, split into numbered lines and annotated with folding ranges.

    Returns:
        tuple[str, int]: Inner HTML and the gutter width it needs.
    """
    response = exchange.response
    content_type = response.get_header("content-type")
    if content_type:
        content_type = content_type.strip()

    if is_browser_supported_image(content_type):
        encoded = base64.b64encode(response.raw_body).decode("ascii")
        return f'<img src="data:{content_type};base64,{encoded}">', DEFAULT_GUTTER_WIDTH

    code = compose_preview(exchange, config, warn)
    annotated, width = add_line_numbers(code)
    return f"<pre><code>{annotated}</code></pre>", width


def render_document(
    exchange: Exchange | None,
    config: PreviewConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> str:
    """Render `exchange` as a self-contained HTML preview document.

    Args:
        exchange: Exchange to render; None produces an empty document.
        config: Rendering configuration. Defaults to a new `PreviewConfig`.
        warn: Optional callback for body validation warnings.

    Returns:
        str: The HTML document, or ``""`` when there is no exchange.

    Raises:
        ConfigError: If `config` names an unknown preview option.

    Examples:
        render_document(exchange, PreviewConfig(preview_option="exchange"))
    """
    if exchange is None:
        return ""

    config = normalize_config(config or PreviewConfig())
    inner_html, width = render_body(exchange, config, warn)

    if not (
        config.disable_adding_href_link_for_large_response
        and is_large_response(exchange.response.body_size_in_bytes, config)
    ):
        inner_html = add_url_links(inner_html)

    stylesheet = html.escape(config.stylesheet_path)
    script = html.escape(config.script_path)
    return f"""
<head>
    <link rel="stylesheet" type="text/css" href="{stylesheet}">
    {render_style_overrides(config, width)}
</head>
<body>
    <div>
        {inner_html}
        <a id="scroll-to-top" role="button" aria-label="scroll to top" onclick="scroll(0,0)"><span class="icon"></span></a>
    </div>
    <script type="text/javascript" src="{script}" charset="UTF-8"></script>
</body>"""
