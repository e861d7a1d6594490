"""Indentation-based folding range detection."""

from __future__ import annotations

import re
from collections.abc import Sequence

from .models import FoldingRange

_NON_WHITESPACE = re.compile(r"\S")


def leading_whitespace_counts(lines: Sequence[str]) -> list[tuple[int, int]]:
    """Return ``(line_index, indent)`` for every line with visible content.

    Lines without a non-whitespace character are left out entirely, so they
    neither open nor close a block.

    Examples:
        leading_whitespace_counts(["a", "   ", "  b"])  # [(0, 0), (2, 2)]
    """
    counts = []
    for index, line in enumerate(lines):
        match = _NON_WHITESPACE.search(line)
        if match is not None:
            counts.append((index, match.start()))
    return counts


def detect_folds(lines: Sequence[str]) -> dict[int, FoldingRange]:
    """Compute foldable blocks from indentation (off-side rule).

    Each indented entry is compared with the previous non-blank one. A deeper
    indent pushes the previous line as a block opener; a shallower indent pops
    every opener indented at least as deep as the current line and records a
    range for it. Equal indents neither open nor close a block.

    Args:
        lines: Display lines, in order.

    Returns:
        dict[int, FoldingRange]: Ranges keyed by the one-based number of the
            opening line. ``start`` is that same one-based number; ``end`` is
            the zero-based index of the first line dedented below the block.

    Examples:
        detect_folds(["{", "  a", "  b", "}"])  # {1: FoldingRange(start=1, end=3)}
    """
    folds: dict[int, FoldingRange] = {}
    stack: list[tuple[int, int]] = []

    counts = leading_whitespace_counts(lines)
    for (prev_index, prev_indent), (line_index, indent) in zip(counts, counts[1:]):
        if prev_indent < indent:
            stack.append((prev_index, prev_indent))
        elif prev_indent > indent:
            while stack and stack[-1][1] >= indent:
                opener_index, _ = stack.pop()
                folds[opener_index + 1] = FoldingRange(opener_index + 1, line_index)

    return folds
