from typing import List

from pydantic import BaseModel, Field


class PricePoint(BaseModel):
    label: str = Field(description="Period label, e.g. a week or month name.")
    price: float = Field(description="Price in local currency per quintal.")


class MarketAnalysisResult(BaseModel):
    analysis: str = Field(description="Markdown analysis of the market trend.")
    prices: List[PricePoint] = Field(description="Price series for charting.")
