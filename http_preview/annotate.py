"""Line numbering and folding markers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .folding import detect_folds
from .markup import split_lines
from .models import FoldingRange, Line

FOLD_ICON = '<span class="icon"></span>'


def gutter_width(line_count: int) -> int:
    """Columns reserved for line numbers: the digits of ``line_count + 1``."""
    return len(str(line_count + 1))


def annotate_lines(
    lines: Sequence[Line], folds: Mapping[int, FoldingRange], width: int
) -> str:
    """Wrap each line in a numbered container carrying its folding metadata.

    Args:
        lines: Rebalanced display lines.
        folds: Folding ranges keyed by one-based line number.
        width: Gutter width shared by every line.

    Returns:
        str: The wrapped lines joined by newlines.

    Examples:
        annotate_lines([Line(1, "{")], {1: FoldingRange(1, 3)}, 1)
        # '<span class="line width-1" start="1" range-start="1" range-end="3">{'
        # '<span class="icon"></span></span>'
    """
    wrapped = []
    for line in lines:
        fold = folds.get(line.number)
        if fold is None:
            attributes = ""
            icon = ""
        else:
            attributes = f' range-start="{fold.start}" range-end="{fold.end}"'
            icon = FOLD_ICON
        wrapped.append(
            f'<span class="line width-{width}" start="{line.number}"{attributes}>'
            f"{line.content}{icon}</span>"
        )
    return "\n".join(wrapped)


def add_line_numbers(code: str) -> tuple[str, int]:
    """Split, fold and number highlighted markup.

    Returns:
        tuple[str, int]: Annotated markup and the gutter width it uses.
    """
    lines = split_lines(code)
    width = gutter_width(len(lines))
    folds = detect_folds([line.content for line in lines])
    return annotate_lines(lines, folds, width), width
