from __future__ import annotations

from pathlib import Path

import pytest

from dictionary_store import DICTIONARY_FILENAME, DictionaryStore
from models import Settings

HELLO = "𐑣𐑧𐑤𐑴"
FRIEND = "𐑓𐑮𐑧𐑯𐑛"
JOHN = "𐑡𐑪𐑯"


@pytest.fixture
def dict_path(tmp_path: Path) -> Path:
    return tmp_path / DICTIONARY_FILENAME


@pytest.fixture
def store(dict_path: Path) -> DictionaryStore:
    s = DictionaryStore.load(dict_path)
    s.define(HELLO, "hello")
    s.define(FRIEND, "friend")
    return s


@pytest.fixture
def settings() -> Settings:
    return Settings()
