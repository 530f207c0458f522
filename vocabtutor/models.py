"""Pydantic data models for vocabulary records and practice sessions."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

import config


class Example(BaseModel):
    """An example sentence pair (German source, Russian counterpart)."""

    german: str
    russian: str


class VocabularyRecord(BaseModel):
    """A stored word or phrase with its translation, grammar notes and examples."""

    original: str
    translation: str
    grammar_forms: list[str] = Field(default_factory=list)
    conjugations: Optional[list[str]] = None
    examples: list[Example] = Field(default_factory=list)
    correct_answers: int = Field(default=0, ge=0)
    wrong_answers: int = Field(default=0, ge=0)

    @field_validator("original", "translation")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    def is_valid(self) -> bool:
        """Check the record has a headword, a translation and complete examples."""
        return (
            bool(self.original)
            and bool(self.translation)
            and all(ex.german.strip() and ex.russian.strip() for ex in self.examples)
        )

    @property
    def article(self) -> str | None:
        """The required article if the record denotes a noun, else None."""
        if not self.grammar_forms:
            return None
        first = self.grammar_forms[0].strip().lower()
        return first if first in config.ARTICLES else None

    @property
    def is_noun(self) -> bool:
        return self.article is not None

    def matches(self, key: str) -> bool:
        """Case-insensitive match against either the original or the translation."""
        key = key.strip().lower()
        return self.original.lower() == key or self.translation.lower() == key

    @property
    def total_attempts(self) -> int:
        return self.correct_answers + self.wrong_answers


class AnswerResult(str, Enum):
    """Grade of a practice answer."""

    CORRECT = "correct"
    ALMOST_CORRECT = "almost_correct"
    WRONG_ARTICLE = "wrong_article"
    WRONG = "wrong"


class AnswerCheck(BaseModel):
    """Outcome of checking one answer against the expected record."""

    result: AnswerResult
    expected: Optional[str] = None
    similarity: Optional[float] = None
    feedback: str = ""

    @property
    def is_correct(self) -> bool:
        return self.result is AnswerResult.CORRECT


class PracticeSentence(BaseModel):
    """A fill-in-the-blank sentence with the word that completes it."""

    german_sentence: str
    russian_translation: str
    missing_word: str


class PracticeType(str, Enum):
    WORD = "word"
    SENTENCE = "sentence"


class PracticeSession(BaseModel):
    """Per-chat practice state. Never persisted.

    Word items carry ``current_item``; sentence items carry
    ``current_sentence`` and never touch the store counters.
    """

    practice_type: PracticeType = PracticeType.WORD
    current_item: Optional[VocabularyRecord] = None
    current_sentence: Optional[PracticeSentence] = None
    expecting_reverse: bool = False
    items_attempted: int = 0
    correct_count: int = 0
    wrong_count: int = 0

    @property
    def accuracy(self) -> float:
        if not self.items_attempted:
            return 0.0
        return self.correct_count / self.items_attempted * 100
