from pydantic import BaseModel, Field, field_validator

from config import DEFAULT_PROMPT_TEMPLATE

SPEECH_MIN = 0.5
SPEECH_MAX = 1.5

class AppSettings(BaseModel):
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE
    selected_voice: str = ""
    speech_rate: float = Field(default=0.8)
    speech_pitch: float = Field(default=1.0)

    @field_validator("prompt_template")
    @classmethod
    def default_blank_template(cls, v):
        v = (v or "").strip()
        return v or DEFAULT_PROMPT_TEMPLATE

    @field_validator("speech_rate", "speech_pitch")
    @classmethod
    def clamp_speech(cls, v):
        return round(min(SPEECH_MAX, max(SPEECH_MIN, float(v))), 2)
