"""Unknown-word capture: ask for a translation when a new Shavian word is finished."""

from __future__ import annotations

import enum
from typing import Callable, Optional

import logging_manager as log_mgr
from dictionary_store import DictionaryStore, Schedule
from models import WordMapping
from script_text import first_script_word, previous_script_word

logger = log_mgr.get_logger().getChild("capture")

WORD_BOUNDARY_KEYS = (" ",)


class CaptureState(enum.Enum):
    IDLE = "idle"
    AWAITING_DEFINITION = "awaiting_definition"


class CaptureFlow:
    """Two-state machine guarding the definition prompt.

    While a prompt is open, further boundary keystrokes are ignored so that
    typing inside the prompt cannot open a second one.
    """

    def __init__(self, store: DictionaryStore, notify: Optional[Callable[[str], None]] = None) -> None:
        self.store = store
        self._notify = notify
        self.state = CaptureState.IDLE
        self.word: Optional[str] = None

    @property
    def awaiting(self) -> bool:
        return self.state is CaptureState.AWAITING_DEFINITION

    def on_keystroke(self, key: str, line: str, ch: int) -> Optional[str]:
        """Handle a key pressed at column ``ch`` of ``line``.

        Returns the word to prompt for, or ``None`` when nothing should happen.
        """
        if key not in WORD_BOUNDARY_KEYS or self.awaiting:
            return None

        word = previous_script_word(line, ch)
        if not word or word in self.store:
            return None
        return self.request(word)

    def request_from_selection(self, selection: str) -> Optional[str]:
        """Start capture for the first Shavian word of ``selection``."""
        if self.awaiting:
            return None
        word = first_script_word(selection)
        if not word:
            return None
        return self.request(word)

    def request(self, word: str) -> str:
        self.state = CaptureState.AWAITING_DEFINITION
        self.word = word
        logger.debug("Awaiting definition for %s", word)
        return word

    def confirm(self, translation: str, schedule: Optional[Schedule] = None) -> Optional[WordMapping]:
        """Store the translation for the pending word.

        Blank input leaves the prompt open, as an empty submit does in the modal.
        """
        if not self.awaiting or self.word is None:
            return None
        translation = (translation or "").strip()
        if not translation:
            return None

        word = self.word
        mapping = self.store.define(word, translation, schedule=schedule)
        self._reset()
        if self._notify is not None:
            self._notify(f"Added: {word} → {mapping.translation}")
        return mapping

    def cancel(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.state = CaptureState.IDLE
        self.word = None
