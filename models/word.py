from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Optional

class WordBase(BaseModel):
    text: str
    hint: str

class WordCreate(WordBase):
    source_prompt_hash: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("source_prompt_hash", "sourcePromptHash"),
    )

class Word(WordCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
