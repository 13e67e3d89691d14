import math
import random
import string
from typing import Dict, List, Optional

MIN_DISTRACTORS = 3
MAX_DISTRACTORS = 8
DISTRACTOR_RATIO = 0.6


def distractor_count(word_length: int) -> int:
    return min(MAX_DISTRACTORS, max(MIN_DISTRACTORS, math.ceil(word_length * DISTRACTOR_RATIO)))


def build_letter_pool(target: str, rng: Optional[random.Random] = None) -> List[Dict]:
    """Shuffled tiles for the letter builder: the word's letters plus distractors.

    Distractors are drawn from letters that do not appear in the word, so
    every tile the word needs is present exactly as often as it is needed.
    """
    rng = rng or random.Random()
    normalized = target.strip()
    base = [{"id": i, "char": char, "distractor": False} for i, char in enumerate(normalized)]
    present = {char.lower() for char in normalized}
    available = [char for char in string.ascii_lowercase if char not in present]
    rng.shuffle(available)
    extras = [
        {"id": len(base) + idx, "char": char, "distractor": True}
        for idx, char in enumerate(available[:distractor_count(len(normalized))])
    ]
    pool = base + extras
    rng.shuffle(pool)
    return pool


def pool_columns(pool_size: int) -> int:
    return min(8, max(4, math.ceil(pool_size / 2)))
