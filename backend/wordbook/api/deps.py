from fastapi import Depends
from sqlalchemy.orm import Session

from ..config import settings
from ..core.database import get_db
from ..core.dictionary import DictionaryClient
from ..core.llm_provider import LLMProvider, build_llm_provider
from ..core.word_store import SqlWordStore, WordStore


# FastAPI dependencies; tests swap them through app.dependency_overrides

def get_word_store(db: Session = Depends(get_db)) -> WordStore:
    return SqlWordStore(db)


def get_dictionary() -> DictionaryClient:
    return DictionaryClient()


def get_llm_provider() -> LLMProvider:
    # raises LLMConfigurationError when the key is missing
    return build_llm_provider(settings)
