from __future__ import annotations

from typing import Dict, List, Optional

from dictionary_store import DictionaryStore
from models import TranslationResult
from script_text import NAME_MARKER, is_script_text, tokenize_mixed


class UsageError(Exception):
    """A user action that cannot be carried out; the message is shown to the user."""


def translate(text: str, store: DictionaryStore, reverse: Optional[Dict[str, str]] = None) -> TranslationResult:
    """Render Latin ``text`` in Shavian using the user's own dictionary.

    Unknown words pass through unchanged and set ``hasUntranslated``.
    Capitalised words get the namer dot.
    """
    if is_script_text(text):
        raise UsageError("Text is already in Shavian; only Latin text can be translated")

    if reverse is None:
        reverse = store.build_reverse_index()

    out: List[str] = []
    has_untranslated = False
    translated = 0
    for segment in tokenize_mixed(text):
        if not segment.is_word:
            out.append(segment.text)
            continue

        script = reverse.get(segment.text.lower())
        if script is None:
            out.append(segment.text)
            has_untranslated = True
            continue

        if segment.text[0].isupper():
            script = NAME_MARKER + script
        out.append(script)
        translated += 1

    return TranslationResult(output="".join(out), hasUntranslated=has_untranslated, translatedCount=translated)
