from enum import Enum

class StudyPhase(str, Enum):
    """Where the learner is within a single word's study loop."""
    LISTENING = "listening"
    TYPING = "typing"
    HINT = "hint"
    ANSWER = "answer"
    RATING = "rating"
