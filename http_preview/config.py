"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .models import PreviewOption


@dataclass
class PreviewConfig:
    """Configuration for rendering HTTP exchange previews.

    Attributes:
        preview_option: Which parts of the exchange are shown (``"exchange"``,
            ``"headers"``, ``"body"`` or ``"default"``). Normalized to a
            `PreviewOption`.
        font_family: CSS font family for the code block, omitted when None.
        font_size: Font size in pixels, omitted when None.
        font_weight: CSS font weight, omitted when None.
        disable_highlight_response_body_for_large_response: Skip highlighting
            of response bodies above the size limit.
        disable_adding_href_link_for_large_response: Skip URL linking for
            responses above the size limit.
        large_response_body_size_limit_in_mb: Size limit, in megabytes, that
            marks a response as large.
        suppress_response_body_content_type_validation_warning: Do not warn
            when a response body does not match its declared content type.
        stylesheet_path: Location of the stylesheet linked by the document.
        script_path: Location of the folding script loaded by the document.
        max_file_size: Maximum exchange file size in bytes read by the CLI.

    Examples:
        PreviewConfig(preview_option="exchange", font_size=14)
    """

    # Layout
    preview_option: str | PreviewOption = PreviewOption.DEFAULT

    # Fonts
    font_family: str | None = None
    font_size: int | None = None
    font_weight: str | None = None

    # Large responses
    disable_highlight_response_body_for_large_response: bool = True
    disable_adding_href_link_for_large_response: bool = True
    large_response_body_size_limit_in_mb: int | float = 5

    # Body formatting
    suppress_response_body_content_type_validation_warning: bool = False

    # Static assets
    stylesheet_path: str = "styles/http-preview.css"
    script_path: str = "scripts/main.js"

    # Limits
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`font_size` must be a positive integer")
    """


def load_config(search_path: Path) -> PreviewConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.http-preview]`` table from `pyproject.toml` and the
    ``[http-preview]`` or ``[tool.http-preview]`` table from
    `.http-preview.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        PreviewConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a table is present but is not a mapping, contains
            unsupported keys, or holds an unknown preview option.

    Examples:
        load_config(Path("exchanges"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "http-preview")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".http-preview.toml",
            table_paths=[("http-preview",), ("tool", "http-preview")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return PreviewConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> PreviewConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> PreviewConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return PreviewConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return PreviewConfig()

    # TOML keys may use dashes; the dataclass fields use underscores.
    raw_config = {key.replace("-", "_"): value for key, value in raw_config.items()}

    try:
        return PreviewConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: PreviewConfig) -> PreviewConfig:
    """Convert loosely typed values into their canonical forms.

    Raises:
        ConfigError: If `preview_option` names an unknown option.
    """
    preview_option = config.preview_option
    if isinstance(preview_option, str):
        try:
            preview_option = PreviewOption(preview_option.strip().lower())
        except ValueError as error:
            choices = ", ".join(option.value for option in PreviewOption)
            raise ConfigError(f"`preview_option` must be one of: {choices}") from error

    return replace(config, preview_option=preview_option)


def validate_config(config: PreviewConfig) -> None:
    """Validate a `PreviewConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the preview option is unknown, a flag is not a boolean,
            a font setting has the wrong type, the size limits are not
            positive, or an asset path is empty.

    Examples:
        validate_config(PreviewConfig(font_size=12))
    """
    config = normalize_config(config)

    _ensure_booleans(
        {
            "disable_highlight_response_body_for_large_response": (
                config.disable_highlight_response_body_for_large_response
            ),
            "disable_adding_href_link_for_large_response": (
                config.disable_adding_href_link_for_large_response
            ),
            "suppress_response_body_content_type_validation_warning": (
                config.suppress_response_body_content_type_validation_warning
            ),
        }
    )

    if config.font_family is not None and not isinstance(config.font_family, str):
        raise ConfigError("`font_family` must be a string")
    if config.font_weight is not None and not isinstance(config.font_weight, (str, int)):
        raise ConfigError("`font_weight` must be a string or an integer")
    if config.font_size is not None:
        _ensure_integers({"font_size": config.font_size})
        _ensure_positive({"font_size": config.font_size})

    limit = config.large_response_body_size_limit_in_mb
    if isinstance(limit, bool) or not isinstance(limit, (int, float)):
        raise ConfigError("`large_response_body_size_limit_in_mb` must be a number")
    if limit <= 0:
        raise ConfigError("`large_response_body_size_limit_in_mb` must be positive")

    _ensure_integers({"max_file_size": config.max_file_size})
    _ensure_positive({"max_file_size": config.max_file_size})

    if not config.stylesheet_path:
        raise ConfigError("`stylesheet_path` must not be empty")
    if not config.script_path:
        raise ConfigError("`script_path` must not be empty")


def apply_overrides(config: PreviewConfig, **overrides: object) -> PreviewConfig:
    """Apply override values to a `PreviewConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        PreviewConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `PreviewConfig`.

    Examples:
        updated = apply_overrides(config, preview_option="body", font_size=13)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> PreviewConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        PreviewConfig: Validated configuration ready for rendering.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), preview_option="exchange")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def is_large_response(body_size_in_bytes: int, config: PreviewConfig) -> bool:
    """Return True when a body exceeds the configured large-response limit."""
    return body_size_in_bytes > config.large_response_body_size_limit_in_mb * 1024 * 1024


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")


def _ensure_booleans(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be a boolean")
