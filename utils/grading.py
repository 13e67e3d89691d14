from Levenshtein import distance as lev_distance
from difflib import SequenceMatcher
from typing import Dict, List, Optional

FEEDBACK_MESSAGES = {
    "NAILED_EXACT": "🌟 Perfect spelling! Great job!",
    "NAILED": "🌟 You know this word well!",
    "ALMOST": "👍 Almost there! Keep practicing!",
    "STUMPED": "🤔 No worries! You'll get it next time!",
}

def normalize_attempt(text: Optional[str]) -> str:
    return (text or "").strip().lower()

def _is_adjacent_transposition(a: str, b: str) -> bool:
    if len(a) != len(b) or a == b:
        return False
    for i in range(len(a) - 1):
        if a[i] != b[i]:
            return a[i] == b[i + 1] and a[i + 1] == b[i] and a[i + 2:] == b[i + 2:]
    return False

def is_slightly_wrong(attempt: str, target: str) -> bool:
    """One insertion, deletion, substitution, or a swap of two neighbouring letters."""
    if not attempt or not target:
        return False
    if abs(len(attempt) - len(target)) > 1:
        return False
    if _is_adjacent_transposition(attempt, target):
        return True
    return lev_distance(attempt, target) == 1

def auto_rate(attempt: str, target: str) -> Optional[str]:
    """Rate an attempt without asking the learner.

    Returns 'NAILED' for an exact match, 'ALMOST' for a small typo, and
    None when the learner has to rate themselves.
    """
    attempt_clean = normalize_attempt(attempt)
    target_clean = normalize_attempt(target)
    if attempt_clean and attempt_clean == target_clean:
        return "NAILED"
    if is_slightly_wrong(attempt_clean, target_clean):
        return "ALMOST"
    return None

def feedback_message(rating: str, attempt: str, target: str) -> str:
    rating = getattr(rating, "value", rating)
    if rating == "NAILED":
        exact = normalize_attempt(attempt) == normalize_attempt(target)
        return FEEDBACK_MESSAGES["NAILED_EXACT" if exact else "NAILED"]
    return FEEDBACK_MESSAGES.get(rating, FEEDBACK_MESSAGES["STUMPED"])

def letter_diff(expected_text: str, actual_text: str) -> Dict[str, List[Dict[str, str]]]:
    """Compute a per-letter diff for display in templates."""
    expected_letters = list(normalize_attempt(expected_text))
    actual_letters = list(normalize_attempt(actual_text))
    matcher = SequenceMatcher(None, expected_letters, actual_letters, autojunk=False)
    expected: List[Dict[str, str]] = []
    actual: List[Dict[str, str]] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for letter in expected_letters[i1:i2]:
                expected.append({"letter": letter, "status": "match"})
            for letter in actual_letters[j1:j2]:
                actual.append({"letter": letter, "status": "match"})
        elif tag == "delete":
            for letter in expected_letters[i1:i2]:
                expected.append({"letter": letter, "status": "missing"})
        elif tag == "insert":
            for letter in actual_letters[j1:j2]:
                actual.append({"letter": letter, "status": "extra"})
        elif tag == "replace":
            for letter in expected_letters[i1:i2]:
                expected.append({"letter": letter, "status": "substitution"})
            for letter in actual_letters[j1:j2]:
                actual.append({"letter": letter, "status": "substitution"})
    return {"expected": expected, "actual": actual}
