from .words import WordEntry


__all__ = [
    "WordEntry",
]
