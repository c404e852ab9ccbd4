from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class PestThreat(BaseModel):
    name: str = Field(description="Pest or disease name.")
    likelihood: float = Field(description="Chance of an outbreak, 0-100.")
    prevention: str = Field(description="Organic or biological prevention first.")


class PestRiskAssessment(BaseModel):
    risk_level: RiskLevel = Field(description="Overall risk for the coming weeks.")
    threats: List[PestThreat] = Field(description="Most likely threats, highest first.")
    advice: str = Field(description="Markdown advice for scouting and prevention.")
