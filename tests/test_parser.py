import pytest

from vocabtutor.formatting import format_tutor_text
from vocabtutor.models import Example, VocabularyRecord
from vocabtutor.parser import ParserState, next_state, parse_example_line, parse_tutor_response

NOUN_RESPONSE = """Tisch
стол
der
1. Der Tisch ist groß - Стол большой
2. Ich kaufe einen Tisch - Я покупаю стол"""

VERB_RESPONSE = """gehen
идти, ходить
ist gegangen
ging
ich gehe
du gehst
er/sie/es geht
wir gehen
ihr geht
sie/Sie gehen
1. Ich gehe nach Hause - Я иду домой
2. Wir gingen spazieren - Мы пошли гулять"""


def test_parses_noun():
    record = parse_tutor_response("Tisch", NOUN_RESPONSE)

    assert record.original == "Tisch"
    assert record.translation == "стол"
    assert record.grammar_forms == ["der"]
    assert record.conjugations is None
    assert record.examples == [
        Example(german="Der Tisch ist groß", russian="Стол большой"),
        Example(german="Ich kaufe einen Tisch", russian="Я покупаю стол"),
    ]
    assert record.correct_answers == 0
    assert record.wrong_answers == 0


def test_parses_verb_with_conjugation_block():
    record = parse_tutor_response("gehen", VERB_RESPONSE)

    assert record.grammar_forms == ["ist gegangen", "ging"]
    assert record.conjugations == [
        "ich gehe",
        "du gehst",
        "er/sie/es geht",
        "wir gehen",
        "ihr geht",
        "sie/Sie gehen",
    ]
    assert len(record.examples) == 2


def test_conjugation_block_is_sticky():
    response = "sein\nбыть\nich bin\nbist\nist\n1. Ich bin hier - Я здесь"
    record = parse_tutor_response("sein", response)

    assert record.grammar_forms == []
    assert record.conjugations == ["ich bin", "bist", "ist"]


def test_russian_query_swaps_direction():
    response = "стол\nTisch\nder\n1. Стол большой - Der Tisch ist groß"
    record = parse_tutor_response("стол", response)

    assert record.original == "Tisch"
    assert record.translation == "стол"
    assert record.grammar_forms == ["der"]
    assert record.examples == [Example(german="Der Tisch ist groß", russian="Стол большой")]


def test_russian_query_takes_lines_as_given():
    # Direction follows the query script, not the reply: a German-first reply to a
    # Russian query is taken line by line (direction swap, see DESIGN.md)
    response = "Tisch\nстол\nder\n1. Der Tisch ist groß - Стол большой"
    record = parse_tutor_response("стол", response)

    assert record.original == "стол"
    assert record.translation == "Tisch"
    assert record.examples == [Example(german="Стол большой", russian="Der Tisch ist groß")]


def test_article_in_headword_moves_to_grammar_forms():
    response = "die Katze\nкошка\nFeminin\n1. Die Katze schläft - Кошка спит"
    record = parse_tutor_response("Katze", response)

    assert record.original == "Katze"
    assert record.grammar_forms == ["die", "Feminin"]


def test_article_not_collapsed_for_russian_query():
    response = "кошка\ndie Katze\n1. Кошка спит - Die Katze schläft"
    record = parse_tutor_response("кошка", response)

    assert record.original == "die Katze"
    assert record.grammar_forms == []


def test_extra_hyphens_rejoined_on_right_side():
    response = "E-Mail\nэлектронное письмо\ndie\n1. Ich schreibe - eine Mail - Я пишу - письмо"
    record = parse_tutor_response("E-Mail", response)

    assert record.examples == [
        Example(german="Ich schreibe", russian="eine Mail - Я пишу - письмо")
    ]


def test_only_first_two_examples_are_read():
    response = "Haus\nдом\ndas\n1. Das Haus - Дом\n2. Ein Haus - Один дом\n3. Drei Häuser - Три дома"
    record = parse_tutor_response("Haus", response)

    assert [ex.german for ex in record.examples] == ["Das Haus", "Ein Haus"]


@pytest.mark.parametrize(
    "response, original, translation",
    [
        ("", "Wald", ""),
        ("Wald", "Wald", ""),
        ("Wald\nлес", "Wald", "лес"),
    ],
)
def test_short_responses_degrade(response, original, translation):
    record = parse_tutor_response("Wald", response)

    assert record.original == original
    assert record.translation == translation
    assert record.examples == []


def test_garbage_never_raises():
    record = parse_tutor_response("xyz", "\n\n-\n1\n2 -\n")
    assert record.original == ""
    assert record.grammar_forms == ["-"]
    assert record.examples == [Example(german="", russian="")] * 2
    assert not record.is_valid()


def test_state_transitions():
    state = next_state(ParserState.HEADER, "Tisch", 0)
    assert state is ParserState.HEADER
    state = next_state(state, "стол", 1)
    assert state is ParserState.HEADER
    state = next_state(state, "ging", 2)
    assert state is ParserState.GRAMMAR
    state = next_state(state, "ich gehe", 3)
    assert state is ParserState.CONJUGATION
    state = next_state(state, "gehst", 4)
    assert state is ParserState.CONJUGATION
    state = next_state(state, "1. Ich gehe - Я иду", 5)
    assert state is ParserState.EXAMPLES
    state = next_state(state, "ich gehe", 6)
    assert state is ParserState.EXAMPLES


def test_parse_example_line():
    assert parse_example_line("1. Hallo - Привет") == ("Hallo", "Привет")
    assert parse_example_line("2) Tschüss - Пока") == ("Tschüss", "Пока")
    assert parse_example_line("3. Nein - Нет") is None


def test_round_trip_through_tutor_text(tisch, gehen):
    for record in (tisch, gehen):
        parsed = parse_tutor_response(record.original, format_tutor_text(record))

        assert parsed.original == record.original
        assert parsed.translation == record.translation
        assert parsed.examples == record.examples
        assert parsed.grammar_forms == record.grammar_forms
        assert parsed.conjugations == record.conjugations


def test_round_trip_plain_word():
    record = VocabularyRecord(
        original="schnell",
        translation="быстро",
        examples=[Example(german="Er läuft schnell", russian="Он бегает быстро")],
    )
    parsed = parse_tutor_response("schnell", format_tutor_text(record))
    assert parsed == record
