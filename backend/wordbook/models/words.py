from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class WordEntry(Base):
    __tablename__ = "words"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, index=True)

    # stored trimmed and lowercased
    word: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    meaning: Mapped[str] = mapped_column(String, nullable=False)

    def __repr__(self) -> str:
        return f"WordEntry(id={self.id!r}, word={self.word!r})"
