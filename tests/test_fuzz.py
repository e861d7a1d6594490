from __future__ import annotations

import os

import pytest
from http_preview.folding import detect_folds
from http_preview.linkify import add_url_links
from http_preview.markup import rebalance, split_lines

atheris = pytest.importorskip("atheris")


def test_split_lines_with_fuzzed_markup():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    checked = 0

    for _ in range(128):
        if provider.remaining_bytes() == 0:
            break
        markup = provider.ConsumeUnicodeNoSurrogates(64)
        assert isinstance(rebalance(markup), str)
        lines = split_lines(markup)
        assert lines
        assert lines[0].number == 1
        checked += 1

    assert checked  # ensure we exercised the loop


def test_detect_folds_with_fuzzed_lines():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    lines: list[str] = []

    while provider.remaining_bytes() > 0 and len(lines) < 64:
        indent = provider.ConsumeIntInRange(0, 12)
        lines.append(" " * indent + provider.ConsumeUnicodeNoSurrogates(16))

    for number, fold in detect_folds(lines).items():
        assert fold.start == number
        assert number < fold.end < len(lines)


def test_add_url_links_with_fuzzed_text():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)

    for _ in range(64):
        if provider.remaining_bytes() == 0:
            break
        text = provider.ConsumeUnicodeNoSurrogates(48)
        assert isinstance(add_url_links(f"<span>{text} https://example.com</span>"), str)
