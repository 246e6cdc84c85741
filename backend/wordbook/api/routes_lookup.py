from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..core.dictionary import DictionaryClient
from ..core.llm_provider import LLMProvider
from ..core.suggestions import suggest_word
from ..core.word_store import normalize_word
from .deps import get_dictionary, get_llm_provider

router = APIRouter(tags=["lookup"])


class WordMeaning(BaseModel):
    word: str
    meaning: str


@router.get("/lookup/{word:path}", response_model=WordMeaning)
async def lookup_word(word: str, dictionary: DictionaryClient = Depends(get_dictionary)):
    """Dictionary definition for `word`. Nothing is saved."""
    key = normalize_word(word)
    if not key:
        raise HTTPException(status_code=400, detail="word required")

    meaning = await dictionary.fetch_meaning(key)
    if not meaning:
        raise HTTPException(status_code=404, detail=f'no definition found for "{key}"')

    return WordMeaning(word=key, meaning=meaning)


@router.get("/learn", response_model=WordMeaning)
async def learn_word(provider: LLMProvider = Depends(get_llm_provider)):
    """
    Random word suggestion from the generative model. Nothing is saved;
    configuration, transport and format errors are mapped in api.errors.
    """
    suggestion = await suggest_word(provider)
    return WordMeaning(word=suggestion.word, meaning=suggestion.meaning)
