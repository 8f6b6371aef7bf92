from __future__ import annotations

import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import logging_manager as log_mgr
from batch_translate import UsageError
from capture import CaptureFlow
from commands import ShavianCommands
from decorations import DecorationBuilder, DecorationView
from dictionary_store import DICTIONARY_FILENAME, DictionaryStore
from editor import BufferEditor, NoticeBoard
from models import (
    CaptureStatus,
    CommandResponse,
    ConfirmRequest,
    DecorationRequest,
    DecorationResponse,
    DefineRequest,
    DictionaryEntryOut,
    DictionaryListing,
    EditorState,
    KeystrokeRequest,
    PasteRequest,
    Settings,
    SettingsUpdate,
)
from settings_store import SETTINGS_FILENAME, SettingsStore

APP_DIR = Path(__file__).resolve().parent

# Data directory (the document collection root):
DATA_DIR = Path(os.getenv("DATA_DIR", str(APP_DIR / "data"))).resolve()

logger = log_mgr.get_logger().getChild("api")


def _parse_csv_env(name: str) -> list[str]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x.strip()]


# CORS:
# - Default to a small allowlist (local dev). For production, set CORS_ORIGINS to the editor origins.
#   Example:
#     CORS_ORIGINS=app://obsidian.md,https://notes.example.com
DEFAULT_CORS_ORIGINS = [
    "app://obsidian.md",
    "http://localhost",
    "http://localhost:3000",
    "http://127.0.0.1",
    "http://127.0.0.1:3000",
]
CORS_ORIGINS = _parse_csv_env("CORS_ORIGINS") or DEFAULT_CORS_ORIGINS


class ShavianService:
    """Everything one editor session shares: dictionary, settings, prompt state, overlay."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.notices = NoticeBoard()
        self.settings = SettingsStore(self.data_dir / SETTINGS_FILENAME)
        self.settings.load()
        self.store = DictionaryStore.load(self.data_dir / DICTIONARY_FILENAME, notify=self.notices)
        self.capture = CaptureFlow(self.store, notify=self.notices)
        self.commands = ShavianCommands(self.store, self.settings, self.capture, self.notices)
        self.view = DecorationView(DecorationBuilder(self.store, self.settings))
        self.settings.subscribe(lambda _settings: self.view.force_refresh())

    def capture_status(self) -> CaptureStatus:
        return CaptureStatus(state=self.capture.state.value, word=self.capture.word)


def create_app(data_dir: Optional[Path] = None) -> FastAPI:
    service = ShavianService(data_dir or DATA_DIR)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Shavian service loaded (%d words)", len(service.store))
        yield
        service.store.save()
        logger.info("Shavian service unloaded")

    app = FastAPI(lifespan=lifespan)
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(UsageError)
    async def usage_error_handler(request: Request, exc: UsageError):
        service.notices(str(exc))
        return JSONResponse(status_code=400, content={"detail": str(exc), "notices": service.notices.drain()})

    def respond(editor: Optional[BufferEditor] = None, **fields) -> CommandResponse:
        state = editor.to_state() if editor is not None else None
        return CommandResponse(editor=state, notices=service.notices.drain(), **fields)

    @app.get("/health")
    async def health():
        return {
            "ok": True,
            "data_dir": str(service.data_dir),
            "dict_exists": service.store.path.exists(),
            "word_count": len(service.store),
        }

    @app.get("/dictionary", response_model=DictionaryListing)
    async def list_dictionary():
        words = [
            DictionaryEntryOut(script=m.script, translation=m.translation, createdAt=m.created_at)
            for m in service.commands.show_dictionary()
        ]
        return DictionaryListing(wordCount=len(words), words=words)

    @app.get("/dictionary/file")
    async def dictionary_file():
        """Return the dictionary in its canonical on-disk shape."""
        return service.store.to_document().model_dump(mode="json")

    @app.put("/dictionary/{script}", response_model=DictionaryEntryOut)
    async def define_word(script: str, body: DefineRequest, background_tasks: BackgroundTasks):
        try:
            m = service.store.define(script, body.translation, schedule=background_tasks.add_task)
        except ValueError as exc:
            raise HTTPException(400, detail=str(exc))
        return DictionaryEntryOut(script=m.script, translation=m.translation, createdAt=m.created_at)

    @app.delete("/dictionary/{script}", response_model=CommandResponse)
    async def delete_word(script: str, background_tasks: BackgroundTasks):
        removed = service.commands.remove_word(script, schedule=background_tasks.add_task)
        return respond(handled=removed)

    @app.get("/settings", response_model=Settings)
    async def get_settings():
        return service.settings()

    @app.put("/settings", response_model=Settings)
    async def put_settings(changes: SettingsUpdate):
        return service.settings.update(changes)

    @app.post("/commands/toggle-auto-translate", response_model=CommandResponse)
    async def toggle_auto_translate():
        enabled = service.commands.toggle_auto_translate()
        return respond(handled=enabled)

    @app.post("/commands/translate-selection", response_model=CommandResponse)
    async def translate_selection(state: EditorState):
        editor = BufferEditor.from_state(state)
        result = service.commands.translate_selection(editor)
        return respond(editor, hasUntranslated=result.hasUntranslated)

    @app.post("/commands/paste", response_model=CommandResponse)
    async def paste(body: PasteRequest):
        editor = BufferEditor.from_state(body.editor)
        handled = service.commands.handle_paste(editor, body.clipboard)
        return respond(editor, handled=handled)

    @app.post("/commands/add-selection", response_model=CommandResponse)
    async def add_selection(state: EditorState):
        word = service.commands.add_selection_to_dictionary(BufferEditor.from_state(state))
        return respond(prompt=word, handled=word is not None)

    @app.post("/decorations", response_model=DecorationResponse)
    async def decorations(body: DecorationRequest):
        spans = service.view.sync(body.text, body.caret, body.viewport_from, body.viewport_to)
        return DecorationResponse(spans=spans)

    @app.get("/capture", response_model=CaptureStatus)
    async def capture_status():
        return service.capture_status()

    @app.post("/capture/keystroke", response_model=CommandResponse)
    async def keystroke(body: KeystrokeRequest):
        word = service.commands.on_keystroke(BufferEditor.from_state(body.editor), body.key)
        return respond(prompt=word, handled=word is not None)

    @app.post("/capture/confirm", response_model=CommandResponse)
    async def confirm(body: ConfirmRequest, background_tasks: BackgroundTasks):
        mapping = service.capture.confirm(body.translation, schedule=background_tasks.add_task)
        return respond(handled=mapping is not None)

    @app.post("/capture/cancel", response_model=CaptureStatus)
    async def cancel():
        service.capture.cancel()
        return service.capture_status()

    @app.get("/notices")
    async def notices():
        return {"notices": service.notices.drain()}

    return app


app = create_app()
