import re

HIDDEN_HINT_FALLBACK = "A clue is hidden to avoid revealing the word, think of its meaning!"
MAX_HINT_LENGTH = 120


def _strip_whole_word(word: str, hint: str) -> str:
    pattern = re.compile(rf"\b{re.escape(word)}\b", flags=re.IGNORECASE)
    return pattern.sub("", hint)


def _strip_spaced_spelling(word: str, hint: str) -> str:
    # "c a t" or "c  a\tt"
    if len(word) < 2:
        return hint
    pattern = re.compile(r"\s+".join(re.escape(letter) for letter in word), flags=re.IGNORECASE)
    return pattern.sub("", hint)


def sanitize_hint(word_text: str, hint: str) -> str:
    """Remove any spelling of the word from its own hint."""
    cleaned_word = (word_text or "").strip().lower()
    if not cleaned_word:
        return hint
    safe_hint = _strip_whole_word(cleaned_word, hint)
    safe_hint = _strip_spaced_spelling(cleaned_word, safe_hint)
    safe_hint = re.sub(r"\s{2,}", " ", safe_hint).strip()
    if not safe_hint:
        safe_hint = HIDDEN_HINT_FALLBACK
    return safe_hint
