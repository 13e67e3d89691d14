from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from utils.sm2 import from_iso, to_iso

class SRS(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    word_id: str = Field(validation_alias=AliasChoices("word_id", "wordId"))
    ease: float = Field(default=2.5, ge=1.3)
    interval: int = Field(default=0, ge=0)  # days
    due: str  # ISO-8601 UTC timestamp
    reps: int = 0

    @field_validator("due")
    @classmethod
    def normalize_due(cls, v):
        try:
            return to_iso(from_iso(v))
        except ValueError:
            raise ValueError(f"due is not an ISO-8601 timestamp: {v!r}")

class StudyStats(BaseModel):
    total: int = 0
    due: int = 0
    learned: int = 0
