from utils.grading import auto_rate, feedback_message, is_slightly_wrong, letter_diff


def test_exact_match_ignores_case_and_whitespace():
    assert auto_rate("  Cat ", "cat") == "NAILED"


def test_single_edits_are_almost():
    assert auto_rate("cot", "cat") == "ALMOST"
    assert auto_rate("ca", "cat") == "ALMOST"
    assert auto_rate("caat", "cat") == "ALMOST"


def test_adjacent_transposition_is_almost():
    assert auto_rate("cta", "cat") == "ALMOST"
    assert is_slightly_wrong("becuase", "because")
    assert is_slightly_wrong("abdc", "abcd")


def test_larger_mistakes_need_manual_rating():
    assert auto_rate("dog", "cat") is None
    assert auto_rate("tac", "cat") is None
    assert auto_rate("ct", "cattle") is None


def test_empty_attempt_is_never_auto_rated():
    assert auto_rate("", "cat") is None
    assert auto_rate("   ", "a") is None
    assert not is_slightly_wrong("", "a")


def test_feedback_message_distinguishes_exact_spelling():
    assert feedback_message("NAILED", "cat", "cat").startswith("🌟 Perfect spelling")
    assert feedback_message("NAILED", "", "cat") == "🌟 You know this word well!"
    assert "Almost there" in feedback_message("ALMOST", "cot", "cat")
    assert "next time" in feedback_message("STUMPED", "dog", "cat")


def test_letter_diff_marks_substitutions():
    diff = letter_diff("cat", "cot")
    assert [item["status"] for item in diff["expected"]] == ["match", "substitution", "match"]
    assert [item["letter"] for item in diff["actual"]] == ["c", "o", "t"]


def test_letter_diff_marks_missing_letters():
    diff = letter_diff("cat", "ct")
    assert {"letter": "a", "status": "missing"} in diff["expected"]
