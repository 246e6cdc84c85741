import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from ..core.dictionary import DictionaryClient
from ..core.word_store import (
    DuplicateWord,
    WordNotFound,
    WordStore,
    WordStoreError,
    normalize_word,
)
from .deps import get_dictionary, get_word_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/words", tags=["words"])


# ---------- Schemas ----------

class WordCreate(BaseModel):
    word: str
    meaning: Optional[str] = None


class WordUpdate(BaseModel):
    word: Optional[str] = None
    meaning: Optional[str] = None


class WordOut(BaseModel):
    id: int
    word: str
    meaning: str

    class Config:
        from_attributes = True


class DeletedOut(BaseModel):
    status: str = "deleted"


# ---------- Helpers ----------

def _storage_failed(exc: WordStoreError) -> HTTPException:
    logger.error("storage error: %s", exc)
    return HTTPException(status_code=500, detail="db error")


async def _resolve_meaning(meaning: Optional[str], word: str, dictionary: DictionaryClient) -> str:
    """Use the given meaning, otherwise ask the dictionary. 400 if neither works."""
    text = (meaning or "").strip()
    if text:
        return text

    looked_up = await dictionary.fetch_meaning(word)
    if not looked_up:
        raise HTTPException(status_code=400, detail="meaning missing and lookup failed")
    return looked_up


# ---------- Endpoints ----------

@router.get("", response_model=List[WordOut])
def list_words(store: WordStore = Depends(get_word_store)):
    try:
        return store.list_entries()
    except WordStoreError as exc:
        raise _storage_failed(exc)


@router.get("/{word:path}", response_model=WordOut)
def get_word(word: str, store: WordStore = Depends(get_word_store)):
    try:
        return store.get(word)
    except WordNotFound:
        raise HTTPException(status_code=404, detail="Word not found")
    except WordStoreError as exc:
        raise _storage_failed(exc)


@router.post("", response_model=WordOut, status_code=status.HTTP_200_OK)
async def create_word(
    payload: WordCreate,
    store: WordStore = Depends(get_word_store),
    dictionary: DictionaryClient = Depends(get_dictionary),
):
    word = normalize_word(payload.word)
    if not word:
        raise HTTPException(status_code=400, detail="word required")

    # Enforce unique word text before spending a dictionary call
    try:
        if await run_in_threadpool(store.exists, word):
            raise HTTPException(status_code=409, detail=f'"{word}" already exists')
    except WordStoreError as exc:
        raise _storage_failed(exc)

    meaning = await _resolve_meaning(payload.meaning, word, dictionary)

    try:
        entry = await run_in_threadpool(store.create, word, meaning)
    except DuplicateWord:
        raise HTTPException(status_code=409, detail=f'"{word}" already exists')
    except WordStoreError as exc:
        raise _storage_failed(exc)

    logger.info("created %r (id=%s)", entry.word, entry.id)
    return entry


@router.put("/{word:path}", response_model=WordOut)
async def update_word(
    word: str,
    payload: WordUpdate,
    store: WordStore = Depends(get_word_store),
    dictionary: DictionaryClient = Depends(get_dictionary),
):
    try:
        current = await run_in_threadpool(store.get, word)
    except WordNotFound:
        raise HTTPException(status_code=404, detail="Word not found")
    except WordStoreError as exc:
        raise _storage_failed(exc)

    new_word = None
    if payload.word is not None:
        new_word = normalize_word(payload.word)
        if not new_word:
            raise HTTPException(status_code=400, detail="word cannot be empty")
        if new_word == current.word:
            new_word = None

    target = new_word or current.word

    if new_word is not None:
        # enforce uniqueness
        try:
            taken = await run_in_threadpool(store.exists, new_word)
        except WordStoreError as exc:
            raise _storage_failed(exc)
        if taken:
            raise HTTPException(status_code=409, detail=f'"{new_word}" already exists')

    meaning = await _resolve_meaning(payload.meaning, target, dictionary)

    try:
        entry = await run_in_threadpool(store.update, current.word, meaning, new_word=new_word)
    except WordNotFound:
        raise HTTPException(status_code=404, detail="Word not found")
    except DuplicateWord:
        raise HTTPException(status_code=409, detail=f'"{target}" already exists')
    except WordStoreError as exc:
        raise _storage_failed(exc)

    logger.info("updated %r", entry.word)
    return entry


@router.delete("/{word:path}", response_model=DeletedOut)
def delete_word(word: str, store: WordStore = Depends(get_word_store)):
    try:
        store.delete(word)
    except WordNotFound:
        raise HTTPException(status_code=404, detail="Word not found")
    except WordStoreError as exc:
        raise _storage_failed(exc)

    logger.info("deleted %r", normalize_word(word))
    return DeletedOut()
