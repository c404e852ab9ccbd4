from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class PlanMode(str, Enum):
    RECOMMEND = "recommend"  # Suggest crops for the land
    EVALUATE = "evaluate"  # Judge a crop the farmer already has in mind
    ROTATION = "rotation"  # Build a rotation around the current crop


class CropSuggestion(BaseModel):
    name: str = Field(description="Crop name in the user's language.")
    match_score: float = Field(description="Fit for the land, 0-100.")
    key_benefit: str = Field(description="Main reason to grow it.")
    climate_fit: Optional[str] = Field(default=None, description="Climate suitability.")
    maturity_days: Optional[int] = Field(default=None, description="Days to harvest.")
    harvest_window: Optional[str] = Field(default=None, description="Expected harvest period.")


class RotationStep(BaseModel):
    period: str = Field(description="Season or months.")
    crop: str = Field(description="Crop for that period.")
    reason: str = Field(description="Why it follows the previous crop.")


class CropPlanResult(BaseModel):
    analysis: str = Field(description="Markdown explanation of the plan.")
    recommendations: Optional[List[CropSuggestion]] = Field(
        default=None, description="Ranked crop suggestions."
    )
    rotation_plan: Optional[List[RotationStep]] = Field(
        default=None, description="Rotation schedule, when asked for."
    )
