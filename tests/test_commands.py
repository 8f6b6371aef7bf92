from __future__ import annotations

import pytest

from batch_translate import UsageError
from capture import CaptureFlow
from commands import ShavianCommands
from editor import BufferEditor, NoticeBoard
from models import SettingsUpdate
from script_text import NAME_MARKER
from settings_store import SettingsStore

from conftest import FRIEND, HELLO


@pytest.fixture
def notices():
    return NoticeBoard()


@pytest.fixture
def settings_store(tmp_path):
    s = SettingsStore(tmp_path / "settings.json")
    s.load()
    return s


@pytest.fixture
def commands(store, settings_store, notices):
    return ShavianCommands(store, settings_store, CaptureFlow(store, notify=notices), notices)


def test_translate_selection_replaces_text(commands, notices):
    editor = BufferEditor("Say Hello friend.", selection_start=4, selection_end=16)

    result = commands.translate_selection(editor)

    assert editor.text == f"Say {NAME_MARKER}{HELLO} {FRIEND}."
    assert result.hasUntranslated is False
    assert notices.drain() == []


def test_translate_selection_partial_notice(commands, notices):
    editor = BufferEditor("hello there", selection_start=0, selection_end=11)

    result = commands.translate_selection(editor)

    assert editor.text == f"{HELLO} there"
    assert result.hasUntranslated is True
    assert notices.drain() == ["Some words could not be translated"]


@pytest.mark.parametrize(
    "text,start,end",
    [
        ("hello", 2, 2),
        (f"x {HELLO}", 0, 6),
        ("nothing known", 0, 13),
    ],
)
def test_translate_selection_usage_errors_leave_text_alone(commands, text, start, end):
    editor = BufferEditor(text, selection_start=start, selection_end=end)

    with pytest.raises(UsageError):
        commands.translate_selection(editor)

    assert editor.text == text


def test_paste_translates_when_enabled(commands):
    editor = BufferEditor("> ", caret=2)

    assert commands.handle_paste(editor, "friend!") is True
    assert editor.text == f"> {FRIEND}!"
    assert editor.caret == len(editor.text)


def test_paste_falls_through(commands, settings_store):
    editor = BufferEditor("", caret=0)

    assert commands.handle_paste(editor, HELLO) is False
    assert commands.handle_paste(editor, "unknown words") is False

    settings_store.update(SettingsUpdate(autoTranslateOnPaste=False))
    assert commands.handle_paste(editor, "friend") is False
    assert editor.text == ""


def test_toggle_auto_translate_persists_and_notifies(commands, settings_store, notices):
    refreshed = []
    settings_store.subscribe(refreshed.append)

    assert commands.toggle_auto_translate() is False
    assert settings_store.path.exists()
    assert refreshed[-1].autoTranslateEnabled is False
    assert notices.drain() == ["Auto-translate disabled"]

    assert commands.toggle_auto_translate() is True


def test_add_selection_starts_capture(commands):
    editor = BufferEditor(f"a 𐑞𐑨𐑑 b", selection_start=0, selection_end=7)

    assert commands.add_selection_to_dictionary(editor) == "𐑞𐑨𐑑"
    assert commands.capture.awaiting


def test_add_selection_while_prompt_open_notifies(commands, notices):
    editor = BufferEditor(f"a 𐑞𐑨𐑑 b", selection_start=0, selection_end=7)
    commands.add_selection_to_dictionary(editor)

    second = BufferEditor(HELLO, selection_start=0, selection_end=4)
    assert commands.add_selection_to_dictionary(second) is None
    assert notices.drain() == ["Finish the current definition first"]
    assert commands.capture.word == "𐑞𐑨𐑑"


def test_add_selection_requires_script_text(commands):
    with pytest.raises(UsageError):
        commands.add_selection_to_dictionary(BufferEditor("abc", selection_start=0, selection_end=3))


def test_keystroke_uses_cursor_line(commands):
    editor = BufferEditor(f"first\nsay 𐑞𐑨𐑑", caret=13)

    assert commands.on_keystroke(editor, " ") == "𐑞𐑨𐑑"


def test_show_dictionary_sorted(commands):
    assert [m.translation for m in commands.show_dictionary()] == ["friend", "hello"]


def test_buffer_editor_cursor_and_lines():
    editor = BufferEditor("ab\ncde", caret=5)

    assert editor.get_cursor() == (1, 2)
    assert editor.get_line(1) == "cde"
    assert editor.get_line(5) == ""
    assert editor.length() == 6
    assert editor.get_selection() == ""
