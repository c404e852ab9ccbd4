from typing import List

from pydantic import BaseModel, Field


class FertilizerTask(BaseModel):
    task: str = Field(description="What to do, e.g. 'Top dressing'.")
    material: str = Field(description="Input to use, organic options first.")
    dosage: str = Field(description="Quantity per acre.")
    timing: str = Field(description="When to apply relative to the crop stage.")


class FertilizerSchedule(BaseModel):
    items: List[FertilizerTask] = Field(description="Ordered feeding plan.")
