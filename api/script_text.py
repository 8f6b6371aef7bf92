"""Shavian script detection and tokenization.

Offsets are Python string indexes (codepoints). Shavian letters live in the
supplementary plane (U+10450..U+1047F), so every letter is one index.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List

SCRIPT_FIRST = 0x10450
SCRIPT_LAST = 0x1047F

# Namer dot: the following word is a proper name.
NAME_MARKER = "·"

_SCRIPT_CLASS = "[\U00010450-\U0001047F]"
_SCRIPT_RE = re.compile(_SCRIPT_CLASS)
_SCRIPT_RUN_RE = re.compile(_SCRIPT_CLASS + "+")
_TOKEN_RE = re.compile(re.escape(NAME_MARKER) + "?" + _SCRIPT_CLASS + "+")
_MIXED_RE = re.compile(r"(\w+)|(\W+)")


@dataclass(frozen=True)
class ScriptToken:
    text: str
    start: int  # inclusive char offset within the scanned line
    is_name: bool = False

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def base_word(self) -> str:
        """Dictionary key: the token without its namer dot."""
        return self.text.lstrip(NAME_MARKER)


@dataclass(frozen=True)
class Segment:
    text: str
    is_word: bool


def is_script_text(s: str) -> bool:
    """True iff ``s`` contains at least one Shavian codepoint."""
    if not s:
        return False
    return _SCRIPT_RE.search(s) is not None


def is_script_word(s: str) -> bool:
    """True iff ``s`` is made of Shavian letters only (a valid dictionary key)."""
    return bool(s) and _SCRIPT_RUN_RE.fullmatch(s) is not None


def find_script_tokens(line: str) -> Iterator[ScriptToken]:
    """Yield maximal Shavian words in ``line``, left to right.

    A word is a name when it carries the namer dot itself or the character right
    before the match is a namer dot.
    """
    for m in _TOKEN_RE.finditer(line):
        token = m.group(0)
        start = m.start()
        is_name = token.startswith(NAME_MARKER) or (start > 0 and line[start - 1] == NAME_MARKER)
        yield ScriptToken(text=token, start=start, is_name=is_name)


def first_script_word(text: str) -> str:
    """Return the first run of Shavian letters in ``text`` (no namer dot), or ''."""
    m = _SCRIPT_RUN_RE.search(text or "")
    return m.group(0) if m else ""


def tokenize_mixed(text: str) -> List[Segment]:
    """Split text into alternating word / non-word segments.

    Non-word runs (punctuation, whitespace) are kept verbatim, so joining the
    segments gives back ``text`` exactly.
    """
    segments: List[Segment] = []
    for m in _MIXED_RE.finditer(text):
        if m.group(1) is not None:
            segments.append(Segment(text=m.group(1), is_word=True))
        else:
            segments.append(Segment(text=m.group(2), is_word=False))
    return segments


def previous_word(line: str, ch: int) -> str:
    """Last whitespace-delimited word of ``line`` before column ``ch``."""
    before = line[:ch].strip()
    if not before:
        return ""
    return before.split()[-1]


def previous_script_word(line: str, ch: int) -> str:
    """Shavian word just before column ``ch``, without namer dot or punctuation."""
    tokens = list(find_script_tokens(previous_word(line, ch)))
    return tokens[-1].base_word if tokens else ""
