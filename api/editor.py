from __future__ import annotations

from collections import deque
from typing import Deque, List, Protocol, Tuple

from models import EditorState


class EditorSurface(Protocol):
    """What the commands need from the host editor."""

    def get_cursor(self) -> Tuple[int, int]: ...

    def get_line(self, n: int) -> str: ...

    def get_offset(self) -> int: ...

    def length(self) -> int: ...

    def get_selection(self) -> str: ...

    def replace_selection(self, text: str) -> None: ...


class BufferEditor:
    """In-memory editor over a plain text buffer."""

    def __init__(self, text: str, caret: int = 0, selection_start: int | None = None, selection_end: int | None = None) -> None:
        self.text = text
        self.caret = min(max(caret, 0), len(text))
        if selection_start is None or selection_end is None:
            self.anchor = self.head = self.caret
        else:
            lo, hi = sorted((selection_start, selection_end))
            self.anchor = min(max(lo, 0), len(text))
            self.head = min(max(hi, 0), len(text))

    @classmethod
    def from_state(cls, state: EditorState) -> "BufferEditor":
        return cls(state.text, state.caret, state.selection_start, state.selection_end)

    def to_state(self) -> EditorState:
        return EditorState(
            text=self.text,
            caret=self.caret,
            selection_start=self.anchor,
            selection_end=self.head,
        )

    def get_cursor(self) -> Tuple[int, int]:
        before = self.text[: self.caret]
        line = before.count("\n")
        ch = self.caret - (before.rfind("\n") + 1)
        return line, ch

    def get_line(self, n: int) -> str:
        lines = self.text.split("\n")
        if n < 0 or n >= len(lines):
            return ""
        return lines[n]

    def get_offset(self) -> int:
        return self.caret

    def length(self) -> int:
        return len(self.text)

    def get_selection(self) -> str:
        return self.text[self.anchor : self.head]

    def replace_selection(self, text: str) -> None:
        self.text = self.text[: self.anchor] + text + self.text[self.head :]
        self.caret = self.anchor + len(text)
        self.anchor = self.head = self.caret


class NoticeBoard:
    """Transient messages for the user, shown once and then dropped."""

    def __init__(self, maxlen: int = 100) -> None:
        self._pending: Deque[str] = deque(maxlen=maxlen)

    def __call__(self, message: str) -> None:
        self._pending.append(message)

    def drain(self) -> List[str]:
        out = list(self._pending)
        self._pending.clear()
        return out
