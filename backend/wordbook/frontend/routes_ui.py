import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from .client import ApiClient, ApiError, get_api_client
from .view import (
    NOTICE_DISMISS_SECONDS,
    Notice,
    TableView,
    build_table,
    find_entry,
    page_url,
)

logger = logging.getLogger(__name__)

FRONTEND_DIR = Path(__file__).parent
STATIC_DIR = FRONTEND_DIR / "static"

templates = Jinja2Templates(directory=str(FRONTEND_DIR / "templates"))

router = APIRouter(prefix="/ui", tags=["ui"], include_in_schema=False)


def _render(request: Request, name: str, notice: Optional[Notice], **context):
    context.update(notice=notice, dismiss_seconds=NOTICE_DISMISS_SECONDS)
    return templates.TemplateResponse(request, name, context)


def _redirect(path: str, notice: Optional[Notice] = None, **params: Optional[str]) -> RedirectResponse:
    return RedirectResponse(page_url(path, notice, **params), status_code=status.HTTP_303_SEE_OTHER)


def _detail_path(word: str) -> str:
    return f"/ui/words/{quote(word, safe='')}"


# ---------- Editable list ----------

@router.get("/")
async def index(
    request: Request,
    edit: Optional[str] = None,
    notice: Optional[str] = None,
    level: Optional[str] = None,
    api: ApiClient = Depends(get_api_client),
):
    banner = Notice.from_query(notice, level)
    try:
        table = build_table(await api.list_words(), editing=edit)
    except ApiError as exc:
        logger.warning("loading words failed: %s", exc.message)
        table = TableView()
        banner = Notice("Failed to load words. Please check if the server is running.", "error")

    return _render(request, "words.html", banner, table=table)


@router.post("/words")
async def add_word(
    word: str = Form(""),
    meaning: str = Form(""),
    api: ApiClient = Depends(get_api_client),
):
    word = word.strip()
    if not word:
        return _redirect("/ui/", Notice("Please enter a word", "error"))

    try:
        created = await api.create_word(word, meaning.strip() or None)
    except ApiError as exc:
        return _redirect("/ui/", Notice(exc.message, "error"))

    return _redirect("/ui/", Notice(f'"{created["word"]}" added successfully!', "success"))


@router.post("/edit/{word:path}")
async def submit_edit(
    word: str,
    meaning: str = Form(""),
    api: ApiClient = Depends(get_api_client),
):
    meaning = meaning.strip()
    if not meaning:
        # stay in edit mode
        return _redirect("/ui/", Notice("Meaning cannot be empty", "error"), edit=word)

    try:
        await api.update_meaning(word, meaning)
    except ApiError as exc:
        # back to viewing; the reloaded list still shows the previous meaning
        return _redirect("/ui/", Notice(exc.message, "error"))

    return _redirect("/ui/", Notice("Word updated successfully!", "success"))


@router.get("/delete/{word:path}")
async def confirm_delete(request: Request, word: str):
    return _render(request, "confirm_delete.html", None, word=word)


@router.post("/delete/{word:path}")
async def delete_word(word: str, api: ApiClient = Depends(get_api_client)):
    try:
        await api.delete_word(word)
    except ApiError as exc:
        return _redirect("/ui/", Notice(exc.message, "error"))

    return _redirect("/ui/", Notice(f'"{word}" deleted successfully!', "success"))


# ---------- Read-only list, detail and new-word flow ----------

@router.get("/browse")
async def browse(
    request: Request,
    notice: Optional[str] = None,
    level: Optional[str] = None,
    api: ApiClient = Depends(get_api_client),
):
    banner = Notice.from_query(notice, level)
    try:
        table = build_table(await api.list_words())
    except ApiError as exc:
        logger.warning("loading words failed: %s", exc.message)
        table = TableView()
        banner = Notice("Failed to load words. Please check if the server is running.", "error")

    return _render(request, "browse.html", banner, table=table)


@router.get("/search")
async def search(q: str = "", api: ApiClient = Depends(get_api_client)):
    query = q.strip()
    if not query:
        return _redirect("/ui/browse", Notice("Please enter a word", "error"))

    try:
        existing = find_entry(await api.list_words(), query)
    except ApiError as exc:
        return _redirect("/ui/browse", Notice(exc.message, "error"))
    if existing:
        return _redirect(_detail_path(existing["word"]))

    try:
        found = await api.lookup(query)
    except ApiError as exc:
        return _redirect("/ui/browse", Notice(exc.message, "error"))

    return _redirect("/ui/new", word=found["word"], meaning=found["meaning"])


@router.get("/learn")
async def learn(api: ApiClient = Depends(get_api_client)):
    try:
        suggestion = await api.learn()
        existing = find_entry(await api.list_words(), suggestion["word"])
    except ApiError as exc:
        return _redirect("/ui/browse", Notice(exc.message, "error"))

    if existing:
        return _redirect(
            _detail_path(existing["word"]),
            Notice(f'"{existing["word"]}" is already in your list', "info"),
        )

    return _redirect("/ui/new", word=suggestion["word"], meaning=suggestion["meaning"])


@router.get("/words/{word:path}")
async def detail(
    request: Request,
    word: str,
    notice: Optional[str] = None,
    level: Optional[str] = None,
    api: ApiClient = Depends(get_api_client),
):
    try:
        entry = await api.get_word(word)
    except ApiError as exc:
        message = f'"{word}" is not in your list' if exc.not_found else exc.message
        return _redirect("/ui/browse", Notice(message, "error"))

    return _render(request, "detail.html", Notice.from_query(notice, level), entry=entry)


@router.get("/new")
async def new_word(request: Request, word: str = "", meaning: str = ""):
    if not word.strip():
        return _redirect("/ui/browse", Notice("Please enter a word", "error"))

    return _render(request, "new_word.html", None, word=word, meaning=meaning)


@router.post("/new")
async def save_new_word(
    word: str = Form(""),
    meaning: str = Form(""),
    api: ApiClient = Depends(get_api_client),
):
    try:
        created = await api.create_word(word.strip(), meaning.strip() or None)
    except ApiError as exc:
        return _redirect("/ui/browse", Notice(exc.message, "error"))

    return _redirect(
        _detail_path(created["word"]),
        Notice(f'"{created["word"]}" added successfully!', "success"),
    )
