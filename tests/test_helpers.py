from __future__ import annotations

import os
import socket
from pathlib import Path

import pytest

from http_preview.exceptions import ExchangeFileError
from http_preview.filesystem import (
    max_file_size_from_env,
    read_exchange_text,
    resolve_exchange_path,
    traverses_symlink,
    write_document,
)


def test_max_file_size_uses_default(monkeypatch):
    monkeypatch.delenv("HTTP_PREVIEW_MAX_FILE_SIZE", raising=False)
    assert max_file_size_from_env(default=1234) == 1234


def test_max_file_size_reads_environment(monkeypatch):
    monkeypatch.setenv("HTTP_PREVIEW_MAX_FILE_SIZE", " 2048 ")
    assert max_file_size_from_env() == 2048


@pytest.mark.parametrize("value", ["invalid", "0", "-5", ""])
def test_max_file_size_rejects_non_positive_integers(monkeypatch, value):
    monkeypatch.setenv("HTTP_PREVIEW_MAX_FILE_SIZE", value)
    with pytest.raises(ValueError) as exc_info:
        max_file_size_from_env()
    assert "HTTP_PREVIEW_MAX_FILE_SIZE" in str(exc_info.value)


def test_resolve_exchange_path(tmp_path: Path):
    target = tmp_path / "login.JSON"
    target.write_text("{}", encoding="utf-8")

    assert resolve_exchange_path(str(target), tmp_path.resolve()) == target.resolve()


def test_resolve_exchange_path_requires_json_extension(tmp_path: Path):
    target = tmp_path / "login.har"
    target.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError) as exc_info:
        resolve_exchange_path(str(target), tmp_path.resolve())
    assert "is not an exchange file" in str(exc_info.value)


def test_resolve_exchange_path_missing_file(tmp_path: Path):
    with pytest.raises(ValueError) as exc_info:
        resolve_exchange_path(str(tmp_path / "missing.json"), tmp_path.resolve())
    assert "does not exist" in str(exc_info.value)


def test_resolve_exchange_path_outside_base(tmp_path: Path):
    base = tmp_path / "captures"
    base.mkdir()
    target = tmp_path / "login.json"
    target.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError) as exc_info:
        resolve_exchange_path(str(target), base.resolve())
    assert "outside of the working directory" in str(exc_info.value)


def test_resolve_exchange_path_rejects_symlinked_directory(tmp_path: Path):
    real_dir = tmp_path / "real"
    real_dir.mkdir()
    (real_dir / "login.json").write_text("{}", encoding="utf-8")
    os.symlink(real_dir, tmp_path / "alias")

    with pytest.raises(ValueError) as exc_info:
        resolve_exchange_path(str(tmp_path / "alias" / "login.json"), tmp_path.resolve())
    assert "Symlinks are not supported" in str(exc_info.value)


def test_traverses_symlink_ignores_unreadable_components(monkeypatch, tmp_path: Path):
    probe = tmp_path / "login.json"
    probe.write_text("{}", encoding="utf-8")
    original_is_symlink = Path.is_symlink

    def _flaky_is_symlink(self):
        if self == probe:
            raise OSError("stat boom")
        return original_is_symlink(self)

    monkeypatch.setattr(Path, "is_symlink", _flaky_is_symlink)
    assert traverses_symlink(probe) is False


def test_read_exchange_text(tmp_path: Path):
    target = tmp_path / "login.json"
    target.write_text('{"café": 1}', encoding="utf-8")

    assert read_exchange_text(target) == '{"café": 1}'


def test_read_exchange_text_enforces_size_limit(tmp_path: Path):
    target = tmp_path / "login.json"
    target.write_text("x" * 20, encoding="utf-8")

    assert read_exchange_text(target, max_size=20) == "x" * 20
    with pytest.raises(ExchangeFileError) as exc_info:
        read_exchange_text(target, max_size=19)
    assert "exceeds the maximum allowed size of 19 bytes" in str(exc_info.value)


def test_read_exchange_text_missing_file(tmp_path: Path):
    with pytest.raises(ExchangeFileError) as exc_info:
        read_exchange_text(tmp_path / "missing.json")
    assert "Error accessing" in str(exc_info.value)


def test_read_exchange_text_rejects_symlink(tmp_path: Path):
    target = tmp_path / "actual.json"
    target.write_text("{}", encoding="utf-8")
    link = tmp_path / "alias.json"
    os.symlink(target, link)

    with pytest.raises(ExchangeFileError) as exc_info:
        read_exchange_text(link)
    assert "Symlinks are not supported" in str(exc_info.value)


def test_read_exchange_text_rejects_directory(tmp_path: Path):
    with pytest.raises(ExchangeFileError) as exc_info:
        read_exchange_text(tmp_path)
    assert "is not a regular file" in str(exc_info.value)


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="mkfifo not available")
def test_read_exchange_text_rejects_fifo_without_blocking(tmp_path: Path):
    fifo = tmp_path / "pipe.json"
    try:
        os.mkfifo(fifo)
    except OSError:  # pragma: no cover
        pytest.skip("Unable to create FIFO")

    with pytest.raises(ExchangeFileError) as exc_info:
        read_exchange_text(fifo)
    assert "is not a regular file" in str(exc_info.value)


@pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="Unix sockets not available")
def test_read_exchange_text_rejects_socket(tmp_path: Path):
    socket_path = tmp_path / "socket.json"
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(str(socket_path))
    except OSError:  # pragma: no cover
        pytest.skip("Unable to create socket")
    finally:
        sock.close()

    with pytest.raises(ExchangeFileError):
        read_exchange_text(socket_path)


def test_read_exchange_text_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "binary.json"
    target.write_bytes(b"\xff\xfe\x00")

    with pytest.raises(ExchangeFileError) as exc_info:
        read_exchange_text(target)
    assert "Invalid UTF-8" in str(exc_info.value)


def test_write_document_replaces_existing_file(tmp_path: Path):
    target = tmp_path / "preview.html"
    target.write_text("old", encoding="utf-8")

    write_document(target, "<html></html>")

    assert target.read_text(encoding="utf-8") == "<html></html>"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["preview.html"]


def test_write_document_rejects_symlink(tmp_path: Path):
    target = tmp_path / "actual.html"
    target.write_text("old", encoding="utf-8")
    link = tmp_path / "alias.html"
    os.symlink(target, link)

    with pytest.raises(IOError):
        write_document(link, "<html></html>")
    assert target.read_text(encoding="utf-8") == "old"


def test_write_document_reports_missing_directory(tmp_path: Path):
    with pytest.raises(IOError) as exc_info:
        write_document(tmp_path / "missing" / "preview.html", "<html></html>")
    assert "Error writing" in str(exc_info.value)
