from typing import List

from pydantic import BaseModel, ConfigDict, Field

from agriwise.models.result import GroundingSource


class ChatReply(BaseModel):
    text: str
    sources: List[GroundingSource] = Field(default_factory=list)


class SpeechAudio(BaseModel):
    """Synthesized speech. Gemini TTS returns raw 24kHz 16-bit mono PCM."""

    model_config = ConfigDict(ser_json_bytes="base64")

    data: bytes
    mime_type: str
