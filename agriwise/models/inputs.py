from typing import List, Optional, Union

from pydantic import BaseModel, Field

from agriwise.models.farm_profile import SoilType
from agriwise.models.request_spec import Role


class Attachment(BaseModel):
    """Binary upload (image of a leaf, soil, field) sent to vision tasks."""

    data: Union[bytes, str] = Field(
        description="Raw bytes, or base64 text as received from a client."
    )
    mime_type: Optional[str] = Field(default=None, description="e.g. image/jpeg")


class ChatTurn(BaseModel):
    role: Role
    text: str


class SoilSample(BaseModel):
    ph: Optional[float] = Field(default=None, description="Measured pH.")
    organic_matter_percent: Optional[float] = Field(
        default=None, description="Organic matter content in percent."
    )
    soil_type: Optional[SoilType] = None
    image: Optional[Attachment] = None


class CropPlanFilters(BaseModel):
    max_duration_days: Optional[int] = None
    water_requirement: Optional[str] = None
    goals: List[str] = Field(default_factory=list)
