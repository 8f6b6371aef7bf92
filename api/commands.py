"""User-facing commands: the actions a host editor binds to menus and keys."""

from __future__ import annotations

from typing import Callable, List, Optional

import logging_manager as log_mgr
from batch_translate import UsageError, translate
from capture import CaptureFlow
from dictionary_store import DictionaryStore, Schedule
from editor import EditorSurface
from models import SettingsUpdate, TranslationResult, WordMapping
from script_text import is_script_text
from settings_store import SettingsStore

logger = log_mgr.get_logger().getChild("commands")


class ShavianCommands:
    def __init__(
        self,
        store: DictionaryStore,
        settings: SettingsStore,
        capture: CaptureFlow,
        notify: Callable[[str], None],
    ) -> None:
        self.store = store
        self.settings = settings
        self.capture = capture
        self.notify = notify

    def show_dictionary(self) -> List[WordMapping]:
        return self.store.entries()

    def toggle_auto_translate(self) -> bool:
        current = self.settings().autoTranslateEnabled
        enabled = self.settings.update(SettingsUpdate(autoTranslateEnabled=not current)).autoTranslateEnabled
        self.notify(f"Auto-translate {'enabled' if enabled else 'disabled'}")
        return enabled

    def translate_selection(self, editor: EditorSurface) -> TranslationResult:
        selection = editor.get_selection()
        if not selection:
            raise UsageError("Select some text to translate")
        if is_script_text(selection):
            raise UsageError("Selection is already in Shavian; only Latin text can be translated")

        result = translate(selection, self.store)
        if result.translatedCount == 0:
            raise UsageError("None of the selected words are in your dictionary")

        editor.replace_selection(result.output)
        if result.hasUntranslated:
            self.notify("Some words could not be translated")
        return result

    def handle_paste(self, editor: EditorSurface, clipboard: str) -> bool:
        """Translate pasted Latin text in place; ``False`` lets the host paste normally."""
        if not self.settings().autoTranslateOnPaste:
            return False
        if not clipboard or is_script_text(clipboard):
            return False

        result = translate(clipboard, self.store)
        if result.translatedCount == 0:
            return False

        editor.replace_selection(result.output)
        if result.hasUntranslated:
            self.notify("Some words could not be translated")
        logger.debug("Translated paste of %d characters", len(clipboard))
        return True

    def add_selection_to_dictionary(self, editor: EditorSurface) -> Optional[str]:
        selection = editor.get_selection()
        if not is_script_text(selection):
            raise UsageError("Select a Shavian word to add it to the dictionary")
        if self.capture.awaiting:
            self.notify("Finish the current definition first")
            return None
        return self.capture.request_from_selection(selection)

    def on_keystroke(self, editor: EditorSurface, key: str) -> Optional[str]:
        line_no, ch = editor.get_cursor()
        return self.capture.on_keystroke(key, editor.get_line(line_no), ch)

    def remove_word(self, script: str, schedule: Optional[Schedule] = None) -> bool:
        return self.store.remove(script, schedule=schedule)
