"""
http-preview: HTML previews of recorded HTTP exchanges.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    http-preview exchange.json --preview-option exchange

Library Usage:
    from pathlib import Path
    from http_preview import PreviewConfig, load_exchange, render_document

    exchange = load_exchange(Path("exchange.json"))
    html = render_document(exchange, PreviewConfig(preview_option="exchange"))
"""

from .annotate import add_line_numbers, annotate_lines, gutter_width
from .config import ConfigError, PreviewConfig, build_config, load_config
from .document import compose_preview, render_document
from .exceptions import ExchangeError, ExchangeFileError, InvalidHeaderError
from .exchange import load_exchange, parse_exchange
from .folding import detect_folds
from .highlight import highlight, highlight_http, language_alias
from .markup import rebalance, split_lines, tokenize
from .models import (
    Exchange,
    FileReference,
    FoldingRange,
    Headers,
    Line,
    PreviewOption,
    Request,
    Response,
)
from .store import ExchangeStore, provide_document

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "render_document",
    "compose_preview",
    "highlight",
    "highlight_http",
    "language_alias",
    "tokenize",
    "rebalance",
    "split_lines",
    "detect_folds",
    "annotate_lines",
    "add_line_numbers",
    "gutter_width",
    # Data models
    "Exchange",
    "FileReference",
    "FoldingRange",
    "Headers",
    "Line",
    "PreviewOption",
    "Request",
    "Response",
    # Configuration
    "PreviewConfig",
    "build_config",
    "load_config",
    # Utilities
    "ExchangeStore",
    "provide_document",
    "load_exchange",
    "parse_exchange",
    # Exceptions
    "ConfigError",
    "ExchangeError",
    "ExchangeFileError",
    "InvalidHeaderError",
    # Version
    "__version__",
]
