"""Reading exchange files and writing rendered documents."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, EXCHANGE_EXTENSIONS
from .exceptions import ExchangeFileError

MAX_FILE_SIZE_ENV_VAR = "HTTP_PREVIEW_MAX_FILE_SIZE"


def max_file_size_from_env(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the exchange size limit, honouring ``HTTP_PREVIEW_MAX_FILE_SIZE``.

    Raises:
        ValueError: If the variable is set to anything but a positive integer.
    """
    raw = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw is None:
        return default

    value = raw.strip()
    if not value.isdigit() or int(value) == 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {raw!r}")
    return int(value)


def _is_link(path: Path) -> bool:
    try:
        return path.is_symlink()
    except OSError:
        return False


def traverses_symlink(path: Path) -> bool:
    """Return True when `path` or one of its parents is a symlink."""
    return any(_is_link(candidate) for candidate in (path, *path.parents))


def resolve_exchange_path(raw_path: str, base_dir: Path) -> Path:
    """Turn a user-supplied exchange path into an absolute path under `base_dir`.

    Args:
        raw_path: Path given on the command line.
        base_dir: Resolved working directory; exchanges outside it are refused.

    Returns:
        Path: The resolved exchange path.

    Raises:
        ValueError: If the path has no exchange extension, goes through a
            symlink, does not exist, or lies outside `base_dir`.

    Examples:
        resolve_exchange_path("captures/login.json", Path.cwd().resolve())
    """
    path = Path(raw_path).expanduser()

    if path.suffix.lower() not in EXCHANGE_EXTENSIONS:
        expected = ", ".join(EXCHANGE_EXTENSIONS)
        raise ValueError(f"{path} is not an exchange file (expected {expected}).")

    if traverses_symlink(path):
        raise ValueError(f"Symlinks are not supported for exchange files: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Cannot resolve {path}: {error}") from error

    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")

    return resolved


def read_exchange_text(filepath: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> str:
    """Read an exchange file as UTF-8 text.

    The file is checked with `os.lstat` before it is opened, so symlinks,
    FIFOs, sockets and devices are refused without blocking on them.

    Args:
        filepath: Exchange file to read.
        max_size: Largest accepted file size in bytes.

    Returns:
        str: The decoded file content.

    Raises:
        ExchangeFileError: If the file is missing, not a regular file, too
            large, unreadable, or not valid UTF-8.
    """
    try:
        info = os.lstat(filepath)
    except OSError as error:
        raise ExchangeFileError(f"Error accessing {filepath}: {error}") from error

    if stat.S_ISLNK(info.st_mode):
        raise ExchangeFileError(f"Symlinks are not supported for exchange files: {filepath}")
    if not stat.S_ISREG(info.st_mode):
        raise ExchangeFileError(f"{filepath} is not a regular file.")
    if info.st_size > max_size:
        raise ExchangeFileError(
            f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        )

    try:
        raw = filepath.read_bytes()
    except OSError as error:
        raise ExchangeFileError(f"Error accessing {filepath}: {error}") from error

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as error:
        raise ExchangeFileError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error


def write_document(filepath: Path, document: str):
    """Write a rendered document atomically.

    The document is written to a temporary file in the target directory and
    moved into place, so readers never observe a partial document.

    Args:
        filepath: Destination path.
        document: Rendered HTML.

    Raises:
        IOError: If the destination is a symlink or cannot be written.

    Examples:
        write_document(Path("preview.html"), html)
    """
    if traverses_symlink(filepath):
        error_message = f"Symlinks are not supported for security reasons: {filepath}"
        raise IOError(error_message)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(document)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        os.replace(temp_path, filepath)
    except OSError as error:
        error_message = f"Error writing {filepath}: {error}"
        raise IOError(error_message) from error
    finally:
        if temp_path is not None:
            try:
                Path(temp_path).unlink(missing_ok=True)
            except OSError:
                pass
