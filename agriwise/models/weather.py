from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class AlertSeverity(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class WeatherAlert(BaseModel):
    """Weather warning relevant to field work (storm, frost, heat wave...)."""

    type: str = Field(description="Alert type, or 'None' when nothing to report.")
    message: str = Field(description="What the farmer should watch out for.")
    severity: AlertSeverity = Field(description="High, Medium or Low.")


class WeatherTip(BaseModel):
    temperature: str = Field(description="Current temperature with unit, e.g. '31°C'.")
    condition: str = Field(description="Short sky condition, e.g. 'Partly cloudy'.")
    humidity: str = Field(description="Relative humidity, e.g. '64%'.")
    farming_tip: str = Field(description="One practical tip for today's field work.")
    alert: Optional[WeatherAlert] = Field(
        default=None, description="Active weather alert, if any."
    )
