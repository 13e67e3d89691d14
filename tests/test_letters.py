import random
from collections import Counter

from utils.letters import build_letter_pool, distractor_count, pool_columns


def test_distractor_count_is_clamped():
    assert distractor_count(1) == 3
    assert distractor_count(5) == 3
    assert distractor_count(6) == 4
    assert distractor_count(20) == 8


def test_pool_holds_every_letter_plus_foreign_distractors():
    pool = build_letter_pool("balloon", random.Random(7))
    letters = [unit["char"] for unit in pool if not unit["distractor"]]
    distractors = [unit["char"] for unit in pool if unit["distractor"]]
    assert Counter(letters) == Counter("balloon")
    assert len(distractors) == distractor_count(len("balloon"))
    assert not set(distractors) & set("balloon")
    assert len({unit["id"] for unit in pool}) == len(pool)


def test_pool_columns_range():
    assert pool_columns(4) == 4
    assert pool_columns(11) == 6
    assert pool_columns(30) == 8
