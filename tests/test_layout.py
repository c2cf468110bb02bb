import pytest

from framevision import Page, layout_pages, wrap_text


def _content(lines):
    return "".join("".join(lines).split())


def test_wrap_text_breaks_at_word_boundaries():
    text = "hello world this is a long line that needs wrapping"

    lines = wrap_text(text, 20)

    assert len(lines) >= 2
    assert all(len(line) <= 20 for line in lines)
    assert lines == ["hello world this is", "a long line that", "needs wrapping"]
    words = text.split()
    assert [w for line in lines for w in line.split()] == words


def test_wrap_text_splits_only_overlong_words():
    lines = wrap_text("ab supercalifragilistic cd", 8)

    assert lines == ["ab", "supercal", "ifragili", "stic cd"]
    assert all(len(line) <= 8 for line in lines)


def test_wrap_text_honours_embedded_breaks_and_blank_lines():
    lines = wrap_text("first line\r\n\nsecond", 30)

    assert lines == ["first line", "", "second"]


def test_wrap_text_keeps_interior_spacing_within_a_line():
    assert wrap_text("a  b", 10) == ["a  b"]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "one",
        "  leading and trailing  ",
        "tab\tseparated\twords that keep going and going",
        "x" * 57,
        "mixed  spacing\n\n  indented paragraph with some words\nend",
        "ünïcödé wörds ßtay intact across the wrap",
    ],
)
@pytest.mark.parametrize("width", [1, 5, 12, 24])
def test_layout_is_lossless_modulo_whitespace(text, width):
    pages = layout_pages(text, width, 3)
    lines = [line for page in pages for line in page.lines]

    assert _content(lines) == "".join(text.split())
    assert all(len(line) <= width for line in lines)
    assert all(1 <= len(page.lines) <= 3 for page in pages)


def test_layout_pages_groups_lines():
    pages = layout_pages("a b c d e f g", 1, 3)

    assert pages == [
        Page(lines=("a", "b", "c")),
        Page(lines=("d", "e", "f")),
        Page(lines=("g",)),
    ]


def test_layout_empty_input_gives_no_pages():
    assert layout_pages("", 10, 4) == []
    assert wrap_text(" \n ", 10) == []


def test_layout_rejects_bad_geometry():
    with pytest.raises(ValueError):
        wrap_text("abc", 0)
    with pytest.raises(ValueError):
        layout_pages("abc", 10, 0)
