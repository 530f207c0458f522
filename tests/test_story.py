import json
import random

import httpx
import pytest

from vocabtutor.models import Example, VocabularyRecord
from vocabtutor.story import (
    StoryUnavailableError,
    build_story_prompt,
    collect_german_words,
    generate_story,
    select_random_words,
)


def test_collect_german_words(tisch, gehen):
    phrase = VocabularyRecord(
        original="sich freuen auf",
        translation="радоваться",
        examples=[Example(german="Ich freue mich auf den Urlaub!", russian="Я жду отпуска!")],
    )

    words = collect_german_words([tisch, gehen, phrase])

    assert words == sorted(set(words))
    # headwords, last token for phrases
    assert {"Tisch", "gehen", "auf"} <= set(words)
    # capitalized example words, punctuation stripped
    assert {"Der", "Ich", "Hause", "Wir", "Urlaub"} <= set(words)
    assert "nach" not in words
    assert "Urlaub!" not in words


def test_select_random_words():
    words = [f"Wort{i}" for i in range(10)]

    selected = select_random_words(words, 4, random.Random(1))
    assert len(selected) == 4
    assert len(set(selected)) == 4
    assert set(selected) <= set(words)

    assert sorted(select_random_words(words, 50)) == words


def test_build_story_prompt():
    prompt = build_story_prompt(["Tisch", "gehen"])
    assert "Tisch, gehen" in prompt
    assert "{words}" not in prompt


async def test_generate_story(store, tisch):
    store.upsert(tisch)
    prompts = []

    def handler(request):
        prompts.append(json.loads(request.content)["messages"][0]["content"])
        return httpx.Response(200, json={"content": [{"type": "text", "text": " Es war einmal... \n"}]})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        story = await generate_story(store, client)

    assert story == "Es war einmal..."
    assert "Der, Tisch" in prompts[0] or "Tisch, Der" in prompts[0]


async def test_generate_story_needs_words(store):
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500))) as client:
        with pytest.raises(StoryUnavailableError):
            await generate_story(store, client)
