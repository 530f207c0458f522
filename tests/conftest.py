"""Shared fixtures for vocabtutor tests."""

import pytest

from vocabtutor.models import Example, VocabularyRecord
from vocabtutor.store import VocabularyStore


@pytest.fixture()
def store(tmp_path):
    return VocabularyStore(tmp_path / "translations_storage.json")


@pytest.fixture()
def tisch():
    return VocabularyRecord(
        original="Tisch",
        translation="стол",
        grammar_forms=["der"],
        examples=[Example(german="Der Tisch ist groß", russian="Стол большой")],
    )


@pytest.fixture()
def gehen():
    return VocabularyRecord(
        original="gehen",
        translation="идти, ходить",
        grammar_forms=["ist gegangen", "ging"],
        conjugations=[
            "ich gehe",
            "du gehst",
            "er/sie/es geht",
            "wir gehen",
            "ihr geht",
            "sie/Sie gehen",
        ],
        examples=[
            Example(german="Ich gehe nach Hause", russian="Я иду домой"),
            Example(german="Wir gingen spazieren", russian="Мы пошли гулять"),
        ],
    )
