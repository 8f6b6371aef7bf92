from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, List

from pydantic import ValidationError

import logging_manager as log_mgr
from models import Settings, SettingsUpdate

logger = log_mgr.get_logger().getChild("settings")

SETTINGS_FILENAME = "settings.json"


class SettingsStore:
    """Host-side settings blob; listeners run after every change."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.settings = Settings()
        self._listeners: List[Callable[[Settings], None]] = []

    def __call__(self) -> Settings:
        return self.settings

    def load(self) -> Settings:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            self.settings = Settings.model_validate(raw)
        except FileNotFoundError:
            self.settings = Settings()
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("Unreadable settings at %s, using defaults (%s)", self.path, exc)
            self.settings = Settings()
        return self.settings

    def save(self) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.settings.model_dump(), indent=2), encoding="utf-8")
        except OSError:
            logger.error("Failed to save settings to %s", self.path, exc_info=True)
            return False
        return True

    def subscribe(self, listener: Callable[[Settings], None]) -> None:
        self._listeners.append(listener)

    def update(self, changes: SettingsUpdate) -> Settings:
        values = changes.model_dump(exclude_none=True)
        self.settings = self.settings.model_copy(update=values)
        self.save()
        for listener in self._listeners:
            listener(self.settings)
        return self.settings
