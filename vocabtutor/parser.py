"""Parse tutor text for a single word into a VocabularyRecord.

The tutor answers in a loose line-oriented layout::

    Tisch                              <- headword in the answered language
    стол                               <- counterpart
    der                                <- grammar notes (article, Partizip II, ...)
    ich gehe / du gehst / ...          <- optional conjugation block
    1. Der Tisch ist groß - Стол большой
    2. ...

Parsing is best-effort and never raises: missing lines fall back to the
query text for the headword and an empty translation.
"""

import re
from enum import Enum

import config
from vocabtutor.input_classifier import has_cyrillic
from vocabtutor.models import Example, VocabularyRecord

_ENUMERATION = re.compile(r"^\d+\s*[.)]?\s*")


class ParserState(Enum):
    """Line classification state. Transitions only move forward."""

    HEADER = "header"
    GRAMMAR = "grammar"
    CONJUGATION = "conjugation"
    EXAMPLES = "examples"


def is_conjugation_line(line: str) -> bool:
    return any(marker in line for marker in config.CONJUGATION_MARKERS)


def is_example_start(line: str) -> bool:
    return line.startswith("1")


def next_state(state: ParserState, line: str, index: int) -> ParserState:
    """
    Compute the state a line belongs to.

    Args:
        state: State after the previous line
        line: Current stripped line
        index: Zero-based line number

    Returns:
        State for the current line
    """
    if index < 2:
        return ParserState.HEADER
    if state is ParserState.EXAMPLES or is_example_start(line):
        return ParserState.EXAMPLES
    if state is ParserState.CONJUGATION or is_conjugation_line(line):
        return ParserState.CONJUGATION
    return ParserState.GRAMMAR


def parse_example_line(line: str) -> tuple[str, str] | None:
    """Split an enumerated example line into its left and right halves."""
    if not (line.startswith("1") or line.startswith("2")):
        return None
    left, *right = [part.strip() for part in line.split("-")]
    left = _ENUMERATION.sub("", left).strip()
    return left, " - ".join(right).strip()


def parse_tutor_response(query: str, response: str) -> VocabularyRecord:
    """
    Turn a tutor response for a single word into a vocabulary record.

    Args:
        query: The user's original query
        response: Raw multi-line tutor text

    Returns:
        VocabularyRecord with zeroed counters (possibly sparse)
    """
    lines = response.splitlines()
    reversed_direction = has_cyrillic(query)

    first = lines[0].strip() if lines else query.strip()
    second = lines[1].strip() if len(lines) > 1 else ""

    if reversed_direction:
        # Russian query: the tutor answers Russian first, German second
        original, translation = second, first
    else:
        original, translation = first, second

    grammar_forms: list[str] = []
    conjugations: list[str] = []
    examples: list[Example] = []

    state = ParserState.HEADER
    for index, raw in enumerate(lines):
        line = raw.strip()
        state = next_state(state, line, index)

        if state is ParserState.HEADER or not line:
            continue
        if state is ParserState.GRAMMAR:
            grammar_forms.append(line)
        elif state is ParserState.CONJUGATION:
            conjugations.append(line)
        else:
            pair = parse_example_line(line)
            if pair is None:
                continue
            left, right = pair
            if reversed_direction:
                examples.append(Example(german=right, russian=left))
            else:
                examples.append(Example(german=left, russian=right))

    if not reversed_direction:
        words = original.split()
        if len(words) == 2 and words[0] in config.ARTICLES:
            grammar_forms.insert(0, words[0])
            original = words[1]

    return VocabularyRecord(
        original=original,
        translation=translation,
        grammar_forms=grammar_forms,
        conjugations=conjugations or None,
        examples=examples,
    )
