from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WordMapping(BaseModel):
    script: str
    translation: str
    created_at: datetime = Field(default_factory=utcnow)


class StoredRecord(BaseModel):
    """One dictionary value as written to shavian-dictionary.json."""

    model_config = ConfigDict(extra="ignore")

    latin: str
    dateAdded: Optional[datetime] = None


class DictionaryFile(BaseModel):
    version: str = "1.0"
    exportDate: datetime = Field(default_factory=utcnow)
    wordCount: int = 0
    dictionary: List[Tuple[str, StoredRecord]] = Field(default_factory=list)


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    autoTranslateEnabled: bool = True
    italiciseTranslations: bool = True
    translationColour: str = "var(--text-accent)"  # empty = inherit
    autoTranslateOnPaste: bool = True


class SettingsUpdate(BaseModel):
    autoTranslateEnabled: Optional[bool] = None
    italiciseTranslations: Optional[bool] = None
    translationColour: Optional[str] = None
    autoTranslateOnPaste: Optional[bool] = None


class DecorationSpan(BaseModel):
    start: int  # inclusive char offset
    end: int    # exclusive char offset
    renderedText: str
    kind: Literal["word", "quote"] = "word"
    italic: bool = False
    colour: Optional[str] = None


class TranslationResult(BaseModel):
    output: str
    hasUntranslated: bool = False
    translatedCount: int = 0


class EditorState(BaseModel):
    text: str
    caret: int = 0
    selection_start: Optional[int] = None
    selection_end: Optional[int] = None


class DictionaryEntryOut(BaseModel):
    script: str
    translation: str
    createdAt: datetime


class DictionaryListing(BaseModel):
    wordCount: int
    words: List[DictionaryEntryOut]


class DefineRequest(BaseModel):
    translation: str


class DecorationRequest(BaseModel):
    text: str
    caret: int = 0
    viewport_from: Optional[int] = None
    viewport_to: Optional[int] = None


class DecorationResponse(BaseModel):
    spans: List[DecorationSpan]


class PasteRequest(BaseModel):
    editor: EditorState
    clipboard: str


class KeystrokeRequest(BaseModel):
    editor: EditorState
    key: str = " "


class ConfirmRequest(BaseModel):
    translation: str


class CaptureStatus(BaseModel):
    state: str
    word: Optional[str] = None


class CommandResponse(BaseModel):
    editor: Optional[EditorState] = None
    handled: bool = True
    hasUntranslated: bool = False
    prompt: Optional[str] = None
    notices: List[str] = Field(default_factory=list)
