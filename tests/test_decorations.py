from __future__ import annotations

import pytest

from decorations import DecorationBuilder, DecorationView, iter_lines
from models import Settings
from script_text import NAME_MARKER

from conftest import FRIEND, HELLO


@pytest.fixture
def builder(store, settings):
    return DecorationBuilder(store, settings)


def test_known_word_is_rendered_with_default_styling(builder):
    text = f"my {FRIEND} here"

    (span,) = builder.build(text, caret=0)

    assert (span.start, span.end) == (3, 8)
    assert span.renderedText == "friend"
    assert span.kind == "word"
    assert span.italic is True
    assert span.colour == "var(--text-accent)"


def test_caret_inside_word_leaves_raw_text(builder):
    text = f"my {FRIEND} here"

    assert builder.build(text, caret=5) == []


@pytest.mark.parametrize("caret", [5, 6, 7, 8, 9])
def test_caret_touching_token_suppresses_decoration(builder, caret):
    # Token occupies [5, 9).
    text = f"abcd {HELLO} xyz"

    assert builder.build(text, caret=caret) == []


@pytest.mark.parametrize("caret", [4, 10])
def test_caret_next_to_token_keeps_decoration(builder, caret):
    text = f"abcd {HELLO} xyz"

    (span,) = builder.build(text, caret=caret)

    assert (span.start, span.end) == (5, 9)


def test_unknown_word_is_not_decorated(builder):
    assert builder.build("𐑞𐑨𐑑 thing", caret=100) == []


def test_name_marker_capitalises_and_is_covered(builder):
    text = f"{NAME_MARKER}{FRIEND}"

    (span,) = builder.build(text, caret=99)

    assert (span.start, span.end) == (0, 6)
    assert span.renderedText == "Friend"


def test_auto_translate_disabled_hides_words_but_keeps_quotes(store):
    builder = DecorationBuilder(store, Settings(autoTranslateEnabled=False))

    spans = builder.build(f"‹{HELLO}›", caret=99)

    assert [(s.kind, s.renderedText) for s in spans] == [("quote", "“"), ("quote", "”")]


def test_style_settings_are_read_per_pass(store):
    current = Settings(italiciseTranslations=False, translationColour="")
    builder = DecorationBuilder(store, lambda: current)

    (span,) = builder.build(HELLO, caret=99)
    assert span.italic is False
    assert span.colour is None

    current = Settings(translationColour="red")
    (span,) = builder.build(HELLO, caret=99)
    assert span.colour == "red"


def test_quotes_and_words_merged_in_order(builder):
    text = f"‹{HELLO} {FRIEND}›"

    spans = builder.build(text, caret=99)

    assert [(s.start, s.end, s.renderedText) for s in spans] == [
        (0, 1, "“"),
        (1, 5, "hello"),
        (6, 11, "friend"),
        (11, 12, "”"),
    ]


@pytest.mark.parametrize("caret", [3, 4])
def test_quote_touching_caret_is_skipped(builder, caret):
    text = "abc‹def"

    assert builder.build(text, caret=caret) == []


def test_quote_away_from_caret_is_replaced(builder):
    (span,) = builder.build("abc‹def", caret=5)

    assert (span.start, span.end, span.renderedText) == (3, 4, "“")


def test_spans_never_cross_lines_and_use_document_offsets(builder):
    text = f"{HELLO}\n{FRIEND}"

    spans = builder.build(text, caret=99)

    assert [(s.start, s.end) for s in spans] == [(0, 4), (5, 10)]


def test_caret_on_other_line_does_not_block(builder):
    text = f"{HELLO}\n{HELLO}"

    spans = builder.build(text, caret=7)

    assert [(s.start, s.end) for s in spans] == [(0, 4)]


def test_viewport_limits_scanned_lines(builder):
    text = f"{HELLO}\nplain\n{FRIEND}"

    spans = builder.build(text, caret=99, viewport_from=5, viewport_to=9)

    assert spans == []
    assert [line.number for line in iter_lines(text, 5, 9)] == [1]


def test_view_rebuilds_only_when_something_changed(builder):
    view = DecorationView(builder)
    text = f"{HELLO} x"

    first = view.sync(text, caret=6)
    view.sync(text, caret=6)
    assert view.rebuilds == 1

    view.sync(text, caret=2)
    assert view.rebuilds == 2
    assert view.spans == []
    assert first[0].renderedText == "hello"


def test_view_sees_dictionary_changes(builder, store):
    view = DecorationView(builder)
    text = "𐑞𐑨𐑑 x"
    assert view.sync(text, caret=6) == []

    store.define("𐑞𐑨𐑑", "that")

    (span,) = view.sync(text, caret=6)
    assert span.renderedText == "that"


def test_view_force_refresh(builder):
    view = DecorationView(builder)
    view.sync(HELLO, caret=9)

    view.force_refresh()
    view.sync(HELLO, caret=9)

    assert view.rebuilds == 2
