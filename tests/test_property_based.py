from __future__ import annotations

import re

from hypothesis import given
from hypothesis import strategies as st
from http_preview.annotate import add_line_numbers, gutter_width
from http_preview.folding import detect_folds
from http_preview.markup import rebalance, split_lines, tokenize
from http_preview.models import TokenKind

_TAG = re.compile(r"<[^>]*>")


def _render(node) -> str:
    if isinstance(node, str):
        return node
    name, css_class, children = node
    inner = "".join(_render(child) for child in children)
    return f'<{name} class="{css_class}">{inner}</{name}>'


markup_strategy = st.recursive(
    st.text(alphabet="ab {}\n", max_size=8),
    lambda children: st.tuples(
        st.sampled_from(["span", "b", "em"]),
        st.sampled_from(["k", "s", "c"]),
        st.lists(children, max_size=4),
    ),
    max_leaves=20,
).map(_render)

indented_lines = st.lists(
    st.tuples(
        st.integers(min_value=0, max_value=8),
        st.text(alphabet="xyz{}", min_size=1, max_size=4),
    ),
    max_size=30,
).map(lambda rows: [" " * indent + text for indent, text in rows])


def _is_balanced(fragment: str) -> bool:
    depth = 0
    for token in tokenize(fragment):
        if token.kind is TokenKind.OPEN_TAG:
            depth += 1
        elif token.kind is TokenKind.CLOSE_TAG:
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


@given(markup_strategy)
def test_split_lines_are_each_balanced(markup: str):
    for line in split_lines(markup):
        assert _is_balanced(line.content)


@given(markup_strategy)
def test_split_lines_keeps_one_line_per_newline(markup: str):
    lines = split_lines(markup)

    assert len(lines) == markup.count("\n") + 1
    assert [line.number for line in lines] == list(range(1, len(lines) + 1))


@given(markup_strategy)
def test_split_lines_preserves_visible_text(markup: str):
    lines = split_lines(markup)

    assert "\n".join(_TAG.sub("", line.content) for line in lines) == _TAG.sub("", markup)


@given(markup_strategy)
def test_rebalance_is_idempotent(markup: str):
    once = rebalance(markup)
    assert rebalance(once) == once


@given(indented_lines)
def test_fold_ranges_are_keyed_by_opening_line(lines: list[str]):
    folds = detect_folds(lines)

    for number, fold in folds.items():
        assert fold.start == number
        assert 1 <= number <= len(lines)
        assert fold.end > number
        assert fold.end < len(lines)


@given(indented_lines, st.data())
def test_blank_lines_never_change_folds_of_visible_lines(lines: list[str], data):
    position = data.draw(st.integers(min_value=0, max_value=len(lines)))
    blank = data.draw(st.text(alphabet=" \t", max_size=6))
    padded = lines[:position] + [blank] + lines[position:]

    def _shift(number: int) -> int:
        return number + 1 if number > position else number

    expected = {
        _shift(number): (_shift(fold.start), fold.end + 1 if fold.end >= position else fold.end)
        for number, fold in detect_folds(lines).items()
    }
    actual = {number: (fold.start, fold.end) for number, fold in detect_folds(padded).items()}

    assert actual == expected
    assert position + 1 not in actual


@given(st.integers(min_value=0, max_value=1_000_000))
def test_gutter_width_counts_digits_of_next_line(line_count: int):
    width = gutter_width(line_count)

    assert width == len(str(line_count + 1))
    assert width >= 1


@given(markup_strategy)
def test_add_line_numbers_wraps_every_line(markup: str):
    annotated, width = add_line_numbers(markup)
    line_count = markup.count("\n") + 1

    assert width == gutter_width(line_count)
    assert annotated.count(f'<span class="line width-{width}" start="') == line_count
