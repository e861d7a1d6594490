"""Constants used across the http-preview package."""

from __future__ import annotations

from .config import PreviewConfig

DEFAULT_CONFIG = PreviewConfig()

# Exchange files
EXCHANGE_EXTENSIONS = (".json",)
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size

# Highlighting
HTTP_LANGUAGE = "http"
REQUEST_BODY_PLACEHOLDER = "NOTE: Request Body From File Not Shown"

# Content types a browser can display inline as <img>
SUPPORTED_IMAGE_FORMATS = (
    "image/jpeg",
    "image/gif",
    "image/webp",
    "image/png",
    "image/bmp",
)

# Gutter width used when no line numbers are rendered
DEFAULT_GUTTER_WIDTH = 2
