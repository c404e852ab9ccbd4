from typing import List, Optional

from pydantic import BaseModel, Field


class Supplier(BaseModel):
    name: str = Field(description="Shop or cooperative name.")
    type: str = Field(description="Seeds, fertilizer, organic inputs, equipment...")
    distance_km: float = Field(description="Distance from the farmer in km.")
    description: str = Field(description="What they sell and why it is relevant.")
    url: Optional[str] = Field(default=None, description="Maps or website link.")


class SupplierSearchResult(BaseModel):
    suppliers: List[Supplier] = Field(description="Nearby suppliers, closest first.")
