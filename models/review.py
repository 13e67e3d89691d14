from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from enum import Enum

class Rating(str, Enum):
    NAILED = "NAILED"
    ALMOST = "ALMOST"
    STUMPED = "STUMPED"

class ReviewCreate(BaseModel):
    # camelCase accepted so backups from the browser build import cleanly
    word_id: str = Field(validation_alias=AliasChoices("word_id", "wordId"))
    rating: Rating

class Review(ReviewCreate):
    model_config = ConfigDict(from_attributes=True)

    ts: int  # epoch milliseconds
