from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional

class GeneratedWord(BaseModel):
    text: str
    hint: str

class GenerateWordsRequest(BaseModel):
    prompt_template: str = Field(
        default="",
        validation_alias=AliasChoices("prompt_template", "promptTemplate"),
    )
    seed: Optional[int] = None
    existing_words: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("existing_words", "existingWords"),
    )

class GenerateWordsResponse(BaseModel):
    words: List[GeneratedWord]
