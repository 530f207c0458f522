"""Weighted selection of the next practice item."""

import random
from typing import Optional

import config
from vocabtutor.logger import get_logger
from vocabtutor.models import VocabularyRecord


def item_weight(record: VocabularyRecord) -> float:
    """
    Selection weight of a record.

    Never-practiced records get NEW_ITEM_WEIGHT; practiced ones get
    1.0 plus their historical error rate.
    """
    total = record.total_attempts
    if total == 0:
        return config.NEW_ITEM_WEIGHT
    return 1.0 + record.wrong_answers / total


def sample(
    records: list[VocabularyRecord], rng: random.Random | None = None
) -> Optional[VocabularyRecord]:
    """
    Pick a record by roulette-wheel selection over item weights.

    Weights are recomputed on every call since counters change between draws.

    Args:
        records: Candidate records
        rng: Random source (a fresh unseeded one if None)

    Returns:
        The chosen record, or None if records is empty
    """
    if not records:
        return None

    rng = rng or random.Random()
    weights = [item_weight(r) for r in records]
    total_weight = sum(weights)
    draw = rng.random() * total_weight

    cumulative = 0.0
    for record, weight in zip(records, weights):
        cumulative += weight
        if cumulative > draw:
            get_logger().debug(f"Sampled '{record.original}' (weight {weight:.2f})")
            return record

    # Float rounding can leave the draw just past the last bucket
    return records[0]
