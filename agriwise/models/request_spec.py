from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskKind(str, Enum):
    CHAT = "chat"
    DIAGNOSIS = "diagnosis"
    IRRIGATION = "irrigation"
    MARKET_ANALYSIS = "market_analysis"
    SOIL_ANALYSIS = "soil_analysis"
    SUPPLIER_SEARCH = "supplier_search"
    SPEECH = "speech"
    PEST_RISK = "pest_risk"
    SUMMARIZE = "summarize"
    WEATHER = "weather"
    FERTILIZER_SCHEDULE = "fertilizer_schedule"
    CROP_PLAN = "crop_plan"


class ToolKind(str, Enum):
    WEB_SEARCH = "web_search"
    MAPS = "maps"


class ResponseModality(str, Enum):
    TEXT = "text"
    AUDIO = "audio"


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


class InlineData(BaseModel):
    model_config = ConfigDict(frozen=True)

    mime_type: str
    data: bytes


class ContentPart(BaseModel):
    """One segment of a request: inline text or inline binary."""

    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None
    inline_data: Optional[InlineData] = None

    @classmethod
    def from_text(cls, text: str) -> "ContentPart":
        return cls(text=text)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ContentPart":
        return cls(inline_data=InlineData(mime_type=mime_type, data=data))


class HistoryTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    text: str


class RequestSpec(BaseModel):
    """Everything needed for one upstream call.

    Two specs with the same ``cache_key`` are interchangeable, the dedup
    cache relies on it.
    """

    model_config = ConfigDict(frozen=True)

    task_kind: TaskKind
    model: str
    language: str
    system_directive: str
    parts: tuple[ContentPart, ...] = ()
    history: tuple[HistoryTurn, ...] = ()
    output_shape: Optional[type[BaseModel]] = None
    tools_enabled: frozenset[ToolKind] = Field(default_factory=frozenset)
    response_modality: ResponseModality = ResponseModality.TEXT
    cache_key: str

    @property
    def is_structured(self) -> bool:
        return self.output_shape is not None
