from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import WordEntry

logger = logging.getLogger(__name__)


class WordStoreError(Exception):
    """Storage failed for a reason other than a missing or duplicate word."""


class WordNotFound(WordStoreError):
    def __init__(self, word: str):
        super().__init__(f"word not found: {word}")
        self.word = word


class DuplicateWord(WordStoreError):
    def __init__(self, word: str):
        super().__init__(f"word already exists: {word}")
        self.word = word


@dataclass
class StoredWord:
    id: int
    word: str
    meaning: str


def normalize_word(word: str) -> str:
    return word.strip().lower()


class WordStore(ABC):
    """
    Storage for word entries, keyed by normalized word text.
    Implementations normalize every key they receive.
    """

    @abstractmethod
    def list_entries(self) -> List[StoredWord]:
        """All entries, word ascending."""

    @abstractmethod
    def get(self, word: str) -> StoredWord:
        ...

    @abstractmethod
    def exists(self, word: str) -> bool:
        ...

    @abstractmethod
    def create(self, word: str, meaning: str) -> StoredWord:
        ...

    @abstractmethod
    def update(self, word: str, meaning: str, new_word: Optional[str] = None) -> StoredWord:
        ...

    @abstractmethod
    def delete(self, word: str) -> None:
        ...


def _to_stored(entry: WordEntry) -> StoredWord:
    return StoredWord(id=entry.id, word=entry.word, meaning=entry.meaning)


class SqlWordStore(WordStore):
    """WordStore over a SQLAlchemy session (one session per request)."""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, word: str) -> Optional[WordEntry]:
        try:
            return self.db.query(WordEntry).filter(WordEntry.word == normalize_word(word)).first()
        except SQLAlchemyError as exc:
            logger.exception("loading %r failed", word)
            raise WordStoreError(str(exc)) from exc

    def _commit(self, word: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateWord(word) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("commit failed for %r", word)
            raise WordStoreError(str(exc)) from exc

    def list_entries(self) -> List[StoredWord]:
        try:
            rows = self.db.query(WordEntry).order_by(WordEntry.word).all()
        except SQLAlchemyError as exc:
            logger.exception("listing words failed")
            raise WordStoreError(str(exc)) from exc
        return [_to_stored(r) for r in rows]

    def get(self, word: str) -> StoredWord:
        entry = self._find(word)
        if entry is None:
            raise WordNotFound(normalize_word(word))
        return _to_stored(entry)

    def exists(self, word: str) -> bool:
        return self._find(word) is not None

    def create(self, word: str, meaning: str) -> StoredWord:
        key = normalize_word(word)
        entry = WordEntry(word=key, meaning=meaning)
        self.db.add(entry)
        self._commit(key)
        self.db.refresh(entry)
        return _to_stored(entry)

    def update(self, word: str, meaning: str, new_word: Optional[str] = None) -> StoredWord:
        entry = self._find(word)
        if entry is None:
            raise WordNotFound(normalize_word(word))

        if new_word is not None:
            entry.word = normalize_word(new_word)
        entry.meaning = meaning

        self._commit(entry.word)
        self.db.refresh(entry)
        return _to_stored(entry)

    def delete(self, word: str) -> None:
        entry = self._find(word)
        if entry is None:
            raise WordNotFound(normalize_word(word))

        self.db.delete(entry)
        self._commit(entry.word)


class InMemoryWordStore(WordStore):
    """Dict-backed store used in tests and local experiments."""

    def __init__(self):
        self._rows: Dict[str, StoredWord] = {}
        self._next_id = 1

    def list_entries(self) -> List[StoredWord]:
        return [self._rows[k] for k in sorted(self._rows)]

    def get(self, word: str) -> StoredWord:
        key = normalize_word(word)
        if key not in self._rows:
            raise WordNotFound(key)
        return self._rows[key]

    def exists(self, word: str) -> bool:
        return normalize_word(word) in self._rows

    def create(self, word: str, meaning: str) -> StoredWord:
        key = normalize_word(word)
        if key in self._rows:
            raise DuplicateWord(key)
        row = StoredWord(id=self._next_id, word=key, meaning=meaning)
        self._next_id += 1
        self._rows[key] = row
        return row

    def update(self, word: str, meaning: str, new_word: Optional[str] = None) -> StoredWord:
        row = self.get(word)
        target = normalize_word(new_word) if new_word is not None else row.word

        if target != row.word:
            if target in self._rows:
                raise DuplicateWord(target)
            del self._rows[row.word]

        updated = StoredWord(id=row.id, word=target, meaning=meaning)
        self._rows[target] = updated
        return updated

    def delete(self, word: str) -> None:
        row = self.get(word)
        del self._rows[row.word]
