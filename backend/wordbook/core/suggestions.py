from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .llm_provider import LLMFormatError, LLMMessage, LLMProvider

logger = logging.getLogger(__name__)

SUGGESTION_PROMPT = (
    "Suggest one real but uncommon English word that is worth learning, "
    "together with a short definition. "
    "Reply with exactly one line in the format word|definition "
    "and nothing else: no numbering, no quotes, no extra text."
)


class SuggestionFormatError(Exception):
    """The model reply could not be read as `word|definition`."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


@dataclass
class Suggestion:
    word: str
    meaning: str


def parse_suggestion(text: str) -> Suggestion:
    """
    Split a `word|definition` reply on the first pipe.
    The word is lowercased, the definition is kept as written.
    """
    if "|" not in text:
        raise SuggestionFormatError("reply has no '|' separator", raw=text)

    word, meaning = (part.strip() for part in text.split("|", 1))
    if not word or not meaning:
        raise SuggestionFormatError("reply has an empty word or definition", raw=text)

    return Suggestion(word=word.lower(), meaning=meaning)


async def suggest_word(provider: LLMProvider) -> Suggestion:
    messages: List[LLMMessage] = [
        LLMMessage(role="user", content=SUGGESTION_PROMPT),
    ]

    try:
        resp = await provider.chat(messages)
    except LLMFormatError as exc:
        raise SuggestionFormatError(str(exc)) from exc

    suggestion = parse_suggestion(resp.content)
    logger.info("model suggested %r", suggestion.word)
    return suggestion
