from typing import List, Optional

from pydantic import BaseModel, Field


class TextureConfidence(BaseModel):
    type: str = Field(description="Identified soil texture, e.g. 'Sandy loam'.")
    score: float = Field(description="Confidence of the texture call, 0-100.")


class SoilAnalysisResult(BaseModel):
    """Soil health report. Score fields are documented as 0-100 but are not clamped."""

    analysis: str = Field(description="Markdown report of the soil health.")
    health_score: float = Field(description="Overall soil health, 0-100.")
    typical_n: str = Field(description="Nitrogen status in words.")
    typical_p: str = Field(description="Phosphorus status in words.")
    typical_k: str = Field(description="Potassium status in words.")
    normalized_n: float = Field(description="Nitrogen level normalized to 0-100.")
    normalized_p: float = Field(description="Phosphorus level normalized to 0-100.")
    normalized_k: float = Field(description="Potassium level normalized to 0-100.")
    companion_advice: str = Field(
        description="Companion planting and biological improvement advice."
    )
    visual_indicators: Optional[List[str]] = Field(
        default=None, description="Traits identified in the soil photo, if any."
    )
    texture_confidence: Optional[TextureConfidence] = Field(
        default=None, description="Texture call from the photo, if any."
    )
