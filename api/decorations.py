"""Live decorations: which ranges of the visible text to display differently.

Decorations never touch the underlying text. Each pass rescans every visible
line and returns sorted, non-overlapping spans; nothing is patched
incrementally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Union

from dictionary_store import DictionaryStore
from models import DecorationSpan, Settings
from script_text import ScriptToken, find_script_tokens

# Angle-quote stand-ins typed in Shavian text, shown as curly quotes.
QUOTE_MARKERS = {
    "‹": "“",
    "›": "”",
}

SettingsSource = Union[Settings, Callable[[], Settings]]


@dataclass(frozen=True)
class Line:
    number: int
    start: int  # document offset of the first character
    text: str

    @property
    def end(self) -> int:
        return self.start + len(self.text)


def iter_lines(text: str, viewport_from: Optional[int] = None, viewport_to: Optional[int] = None) -> Iterator[Line]:
    """Yield the lines of ``text`` that intersect ``[viewport_from, viewport_to]``."""
    lo = 0 if viewport_from is None else max(0, viewport_from)
    hi = len(text) if viewport_to is None else viewport_to

    pos = 0
    for number, line_text in enumerate(text.split("\n")):
        line = Line(number=number, start=pos, text=line_text)
        pos = line.end + 1
        if line.end < lo:
            continue
        if line.start > hi:
            break
        yield line


def caret_touches(caret: int, start: int, end: int) -> bool:
    """True when the caret sits inside ``[start, end]``, boundaries included."""
    return start <= caret <= end


def render_translation(translation: str, is_name: bool) -> str:
    if is_name and translation:
        return translation[0].upper() + translation[1:]
    return translation


class DecorationBuilder:
    def __init__(self, store: DictionaryStore, settings: SettingsSource) -> None:
        self.store = store
        self._settings = settings

    @property
    def settings(self) -> Settings:
        if callable(self._settings):
            return self._settings()
        return self._settings

    def build(
        self,
        text: str,
        caret: int,
        viewport_from: Optional[int] = None,
        viewport_to: Optional[int] = None,
    ) -> List[DecorationSpan]:
        settings = self.settings
        spans: List[DecorationSpan] = []
        for line in iter_lines(text, viewport_from, viewport_to):
            spans.extend(self.build_line(line, caret, settings))
        return spans

    def build_line(self, line: Line, caret: int, settings: Optional[Settings] = None) -> List[DecorationSpan]:
        if settings is None:
            settings = self.settings
        spans = self._quote_spans(line, caret)
        spans.extend(self._word_spans(line, caret, settings))
        # Quote markers and Shavian letters never share a character.
        spans.sort(key=lambda s: s.start)
        return spans

    def _quote_spans(self, line: Line, caret: int) -> List[DecorationSpan]:
        spans: List[DecorationSpan] = []
        for idx, ch in enumerate(line.text):
            replacement = QUOTE_MARKERS.get(ch)
            if replacement is None:
                continue
            start = line.start + idx
            if caret_touches(caret, start, start + 1):
                continue
            spans.append(DecorationSpan(start=start, end=start + 1, renderedText=replacement, kind="quote"))
        return spans

    def _word_spans(self, line: Line, caret: int, settings: Settings) -> List[DecorationSpan]:
        if not settings.autoTranslateEnabled:
            return []

        spans: List[DecorationSpan] = []
        for token in find_script_tokens(line.text):
            span = self._word_span(line, token, caret, settings)
            if span is not None:
                spans.append(span)
        return spans

    def _word_span(self, line: Line, token: ScriptToken, caret: int, settings: Settings) -> Optional[DecorationSpan]:
        start = line.start + token.start
        end = line.start + token.end
        # The word being typed stays as raw Shavian.
        if caret_touches(caret, start, end):
            return None

        mapping = self.store.get(token.base_word)
        if mapping is None:
            return None

        return DecorationSpan(
            start=start,
            end=end,
            renderedText=render_translation(mapping.translation, token.is_name),
            kind="word",
            italic=settings.italiciseTranslations,
            colour=settings.translationColour or None,
        )


@dataclass(frozen=True)
class ViewUpdate:
    doc_changed: bool = False
    viewport_changed: bool = False
    selection_set: bool = False
    dictionary_changed: bool = False
    forced: bool = False

    @property
    def needs_rebuild(self) -> bool:
        return (
            self.doc_changed
            or self.viewport_changed
            or self.selection_set
            or self.dictionary_changed
            or self.forced
        )


class DecorationView:
    """Holds the current decoration set for one editor and decides when to rebuild."""

    def __init__(self, builder: DecorationBuilder) -> None:
        self.builder = builder
        self.spans: List[DecorationSpan] = []
        self.rebuilds = 0
        self._text: Optional[str] = None
        self._caret: Optional[int] = None
        self._viewport: tuple = (None, None)
        self._revision: Optional[int] = None
        self._forced = True

    def force_refresh(self) -> None:
        self._forced = True

    def diff(self, text: str, caret: int, viewport_from: Optional[int] = None, viewport_to: Optional[int] = None) -> ViewUpdate:
        return ViewUpdate(
            doc_changed=text != self._text,
            viewport_changed=(viewport_from, viewport_to) != self._viewport,
            selection_set=caret != self._caret,
            dictionary_changed=self.builder.store.revision != self._revision,
            forced=self._forced,
        )

    def sync(
        self,
        text: str,
        caret: int,
        viewport_from: Optional[int] = None,
        viewport_to: Optional[int] = None,
    ) -> List[DecorationSpan]:
        update = self.diff(text, caret, viewport_from, viewport_to)
        if not update.needs_rebuild:
            return self.spans

        self.spans = self.builder.build(text, caret, viewport_from, viewport_to)
        self.rebuilds += 1
        self._text = text
        self._caret = caret
        self._viewport = (viewport_from, viewport_to)
        self._revision = self.builder.store.revision
        self._forced = False
        return self.spans
