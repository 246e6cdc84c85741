from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

# seconds before the banner fades out
NOTICE_DISMISS_SECONDS = 3

PLACEHOLDER_TEXT = "No words yet. Add your first word above!"

NOTICE_LEVELS = ("info", "success", "error")


class RowMode(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"


@dataclass
class RowView:
    word: str
    meaning: str
    mode: RowMode = RowMode.VIEWING

    @property
    def editing(self) -> bool:
        return self.mode is RowMode.EDITING


@dataclass
class TableView:
    rows: List[RowView] = field(default_factory=list)
    placeholder: Optional[str] = None

    # word, meaning, edit, delete
    columns: int = 4


def build_table(entries: Iterable[Dict[str, Any]], editing: Optional[str] = None) -> TableView:
    """
    One row per entry. At most one row is in EDITING mode: the one whose
    word matches `editing` (case-insensitive). No entries gives a single
    placeholder row.
    """
    key = editing.strip().lower() if editing else None
    rows = [
        RowView(
            word=e["word"],
            meaning=e["meaning"],
            mode=RowMode.EDITING if key is not None and e["word"].lower() == key else RowMode.VIEWING,
        )
        for e in entries
    ]
    if not rows:
        return TableView(rows=[], placeholder=PLACEHOLDER_TEXT)
    return TableView(rows=rows)


def find_entry(entries: Iterable[Dict[str, Any]], word: str) -> Optional[Dict[str, Any]]:
    key = word.strip().lower()
    for e in entries:
        if e["word"].lower() == key:
            return e
    return None


@dataclass
class Notice:
    """The single notification banner shown on a page."""

    message: str
    level: str = "info"

    @classmethod
    def from_query(cls, message: Optional[str], level: Optional[str]) -> Optional["Notice"]:
        if not message:
            return None
        return cls(message=message, level=level if level in NOTICE_LEVELS else "info")

    def params(self) -> Dict[str, str]:
        return {"notice": self.message, "level": self.level}


def page_url(path: str, notice: Optional[Notice] = None, **params: Optional[str]) -> str:
    """Build a redirect target. A new notice replaces whatever the old URL carried."""
    query = {k: v for k, v in params.items() if v is not None}
    if notice is not None:
        query.update(notice.params())
    if not query:
        return path
    return f"{path}?{urlencode(query)}"
