"""Persistent Shavian -> Latin dictionary.

On-disk shape written by :meth:`DictionaryStore.save`::

    {
      "version": "1.0",
      "exportDate": "2026-01-01T00:00:00Z",
      "wordCount": 1,
      "dictionary": [["𐑣𐑧𐑤𐑴", {"latin": "hello", "dateAdded": "..."}]]
    }

Readers also accept a bare array of ``[key, value]`` pairs and a bare
``{key: value}`` object, where ``value`` is a record or a legacy plain string.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from pydantic import ValidationError

import logging_manager as log_mgr
from models import DictionaryFile, StoredRecord, WordMapping, utcnow
from script_text import is_script_word

logger = log_mgr.get_logger().getChild("dictionary")

DICTIONARY_FILENAME = "shavian-dictionary.json"

# (key, raw value) pairs pulled out of whichever file shape matched.
RawPairs = List[Tuple[Any, Any]]
Notify = Callable[[str], None]
Schedule = Callable[[Callable[[], bool]], None]


class DictionaryFormatError(ValueError):
    """The parsed JSON does not have the shape a given reader expects."""


def _parse_canonical(raw: Any) -> RawPairs:
    if not isinstance(raw, dict) or not isinstance(raw.get("dictionary"), list):
        raise DictionaryFormatError("not a canonical dictionary document")
    return _pairs_from_list(raw["dictionary"])


def _parse_pair_array(raw: Any) -> RawPairs:
    if not isinstance(raw, list):
        raise DictionaryFormatError("not an array of pairs")
    return _pairs_from_list(raw)


def _parse_bare_object(raw: Any) -> RawPairs:
    if not isinstance(raw, dict):
        raise DictionaryFormatError("not a key/value object")
    return list(raw.items())


def _pairs_from_list(items: List[Any]) -> RawPairs:
    pairs: RawPairs = []
    for item in items:
        if isinstance(item, (list, tuple)) and len(item) == 2:
            pairs.append((item[0], item[1]))
        else:
            logger.warning("Skipping malformed dictionary entry: %r", item)
    return pairs


# First reader that accepts the document wins.
_READERS: Tuple[Callable[[Any], RawPairs], ...] = (
    _parse_canonical,
    _parse_pair_array,
    _parse_bare_object,
)


def parse_document(raw: Any) -> RawPairs:
    for reader in _READERS:
        try:
            return reader(raw)
        except DictionaryFormatError:
            continue
    raise DictionaryFormatError(f"unsupported dictionary document: {type(raw).__name__}")


def _as_utc(value: Optional[datetime]) -> datetime:
    if value is None:
        return utcnow()
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def mapping_from_pair(key: Any, value: Any) -> Optional[WordMapping]:
    """Build a WordMapping from one stored pair; ``None`` if the pair is unusable."""
    if not isinstance(key, str) or not is_script_word(key):
        return None

    if isinstance(value, str):
        translation = value.strip()
        created_at = utcnow()
    else:
        try:
            record = StoredRecord.model_validate(value)
        except ValidationError:
            # Keep the translation even when only the date is broken.
            if isinstance(value, dict) and isinstance(value.get("latin"), str):
                record = StoredRecord(latin=value["latin"])
            else:
                return None
        translation = record.latin.strip()
        created_at = _as_utc(record.dateAdded)

    if not translation:
        return None
    return WordMapping(script=key, translation=translation, created_at=created_at)


class DictionaryStore:
    """In-memory dictionary keyed by Shavian word, persisted to a JSON file.

    The in-memory map is the source of truth; every mutation updates it first
    and then persists, so a failed save never loses the session's words.
    Saves may run on a worker thread, so the map is only read or changed
    while holding ``_lock``.
    """

    def __init__(self, path: Path, notify: Optional[Notify] = None) -> None:
        self.path = Path(path)
        self._notify = notify
        self._lock = threading.RLock()
        self._words: Dict[str, WordMapping] = {}
        self._reverse: Optional[Dict[str, str]] = None
        self.revision = 0

    # ----- lifecycle -----

    @classmethod
    def load(cls, path: Path, notify: Optional[Notify] = None) -> "DictionaryStore":
        store = cls(path, notify=notify)
        store.reload()
        return store

    def reload(self) -> int:
        """Replace the in-memory map with the file contents; never raises."""
        words: Dict[str, WordMapping] = {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            pairs = parse_document(raw)
        except (OSError, ValueError) as exc:
            logger.info("Dictionary not found, starting with empty dictionary (%s)", exc)
            pairs = []

        for key, value in pairs:
            mapping = mapping_from_pair(key, value)
            if mapping is None:
                logger.warning("Skipping unusable dictionary entry for key %r", key)
                continue
            words[mapping.script] = mapping

        with self._lock:
            self._words = words
            self._touch()

        if pairs:
            logger.info("Loaded %d Shavian words", len(words))
        return len(words)

    def to_document(self) -> DictionaryFile:
        with self._lock:
            words = list(self._words.values())
        entries = [(m.script, StoredRecord(latin=m.translation, dateAdded=m.created_at)) for m in words]
        return DictionaryFile(exportDate=utcnow(), wordCount=len(entries), dictionary=entries)

    def save(self) -> bool:
        """Write the canonical document; failures are logged, not raised."""
        with self._lock:
            try:
                payload = self.to_document().model_dump(mode="json")
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
                tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
                tmp_path.replace(self.path)
            except (OSError, TypeError, ValueError):
                logger.error("Failed to save dictionary to %s", self.path, exc_info=True)
                return False

        logger.info("Saved %d words", payload["wordCount"])
        return True

    # ----- queries -----

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, script: object) -> bool:
        return script in self._words

    def __iter__(self) -> Iterator[WordMapping]:
        with self._lock:
            return iter(list(self._words.values()))

    def get(self, script: str) -> Optional[WordMapping]:
        return self._words.get(script)

    def entries(self) -> List[WordMapping]:
        """All mappings sorted by translation, case-insensitive."""
        with self._lock:
            words = list(self._words.values())
        return sorted(words, key=lambda m: (m.translation.casefold(), m.script))

    def build_reverse_index(self) -> Dict[str, str]:
        """Lowercase translation -> Shavian key; later entries win on duplicates."""
        with self._lock:
            if self._reverse is None:
                self._reverse = {m.translation.lower(): m.script for m in self._words.values()}
            return dict(self._reverse)

    # ----- mutations -----

    def define(self, script: str, translation: str, schedule: Optional[Schedule] = None) -> WordMapping:
        script = (script or "").strip()
        translation = (translation or "").strip()
        if not is_script_word(script):
            raise ValueError(f"Not a Shavian word: {script!r}")
        if not translation:
            raise ValueError("Translation must not be empty")

        with self._lock:
            existing = self._words.get(script)
            if existing is not None:
                existing.translation = translation
                mapping = existing
            else:
                mapping = WordMapping(script=script, translation=translation)
                self._words[script] = mapping
            self._touch()

        self._persist(schedule)
        return mapping

    def remove(self, script: str, schedule: Optional[Schedule] = None) -> bool:
        with self._lock:
            removed = self._words.pop(script, None) is not None
            if removed:
                self._touch()
        if not removed:
            return False

        self._persist(schedule)
        if self._notify is not None:
            self._notify(f"Removed: {script}")
        return True

    def merge(self, other: "DictionaryStore", overwrite: bool = True) -> int:
        """Copy words from ``other``; returns how many keys were added or changed."""
        changed = 0
        with self._lock:
            for mapping in other:
                existing = self._words.get(mapping.script)
                if existing is None:
                    self._words[mapping.script] = mapping.model_copy()
                    changed += 1
                elif overwrite and existing.translation != mapping.translation:
                    existing.translation = mapping.translation
                    changed += 1
            if changed:
                self._touch()
        if changed:
            self._persist(None)
        return changed

    def _touch(self) -> None:
        self._reverse = None
        self.revision += 1

    def _persist(self, schedule: Optional[Schedule]) -> None:
        if schedule is not None:
            schedule(self.save)
        else:
            self.save()
