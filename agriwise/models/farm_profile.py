from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class SoilType(str, Enum):
    """Broad soil types a farmer can pick or the vision model can suggest."""

    BLACK = "Black soil"  # Regur, clayey, fertile
    RED = "Red soil"  # Iron-rich, low organic matter
    ALLUVIAL = "Alluvial soil"  # River plains, fertile, loamy
    LATERITE = "Laterite soil"  # Acidic, leached, brick-red
    DESERT = "Desert soil"  # Sandy, arid, low organic matter
    FOREST = "Forest soil"  # High humus, dark, acidic
    SALINE = "Saline/Alkaline soil"  # White crust, high pH
    SANDY = "Sandy soil"
    CLAY = "Clay soil"
    SILTY = "Silty soil"
    LOAMY = "Loamy soil"


class Location(BaseModel):
    """Geographical position of the farmer or the farm."""

    latitude: float = Field(ge=-90, le=90, description="Latitude in degrees.")
    longitude: float = Field(ge=-180, le=180, description="Longitude in degrees.")

    def rounded(self, precision: int) -> tuple[float, float]:
        return (round(self.latitude, precision), round(self.longitude, precision))

    def describe(self) -> str:
        return f"{self.latitude:.4f}, {self.longitude:.4f}"


class FarmerProfile(BaseModel):
    """
    Context about the farmer's land. It is handed to the model as prose,
    never as structured fields.
    """

    name: Optional[str] = Field(default=None, description="Farmer's name.")
    land_size_acres: Optional[float] = Field(
        default=None, description="Total land under the farmer's care in acres."
    )
    soil_type: Optional[SoilType] = Field(default=None, description="Dominant soil type.")
    active_crops: List[str] = Field(
        default_factory=list, description="Crops currently in the field."
    )

    def is_empty(self) -> bool:
        return (
            self.land_size_acres is None
            and self.soil_type is None
            and not self.active_crops
        )
