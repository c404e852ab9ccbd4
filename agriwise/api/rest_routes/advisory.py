from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from agriwise.api.dependencies import get_advisory_service
from agriwise.models.crop_plan import CropPlanResult, PlanMode
from agriwise.models.farm_profile import FarmerProfile, Location, SoilType
from agriwise.models.fertilizer_schedule import FertilizerSchedule
from agriwise.models.inputs import Attachment, CropPlanFilters, SoilSample
from agriwise.models.market import MarketAnalysisResult
from agriwise.models.pest_risk import PestRiskAssessment
from agriwise.models.result import Grounded
from agriwise.models.soil_analysis import SoilAnalysisResult
from agriwise.models.supplier import SupplierSearchResult
from agriwise.models.weather import WeatherTip
from agriwise.services.advisory_service import AdvisoryService

router = APIRouter(prefix="/advisory", tags=["Advisory"])


class AdvisoryRequest(BaseModel):
    language: str = Field(default="en", description="UI language code.")


class DiagnosisRequest(AdvisoryRequest):
    image: Attachment
    symptoms: str = ""


class DiagnosisResponse(BaseModel):
    report: str


class IrrigationRequest(AdvisoryRequest):
    crop: str
    stage: str = "Vegetative"
    moisture: float = Field(description="Soil moisture in percent.")
    location: Optional[Location] = None


class IrrigationResponse(BaseModel):
    advice: str


class MarketRequest(AdvisoryRequest):
    query: str
    category: str = ""
    period: str = ""
    location: Optional[Location] = None


class SoilRequest(AdvisoryRequest):
    sample: SoilSample
    location: Optional[Location] = None


class SupplierRequest(AdvisoryRequest):
    query: str
    location: Location


class PestRiskRequest(AdvisoryRequest):
    crop: str
    stage: str = ""
    location: Optional[Location] = None


class WeatherRequest(AdvisoryRequest):
    location: Location


class FertilizerScheduleRequest(AdvisoryRequest):
    crop: str
    stage: str
    soil_ph: Optional[float] = None


class CropPlanRequest(AdvisoryRequest):
    mode: PlanMode = PlanMode.RECOMMEND
    soil_type: Optional[SoilType] = None
    filters: Optional[CropPlanFilters] = None
    crop_input: str = ""
    location: Optional[Location] = None
    profile: Optional[FarmerProfile] = None


@router.post("/diagnosis", response_model=DiagnosisResponse)
async def diagnose_crop(
    request: DiagnosisRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    """Diagnose a crop problem from a photo and the reported symptoms."""
    report = await service.diagnose_crop(
        image=request.image, symptoms=request.symptoms, language=request.language
    )
    return DiagnosisResponse(report=report)


@router.post("/irrigation", response_model=IrrigationResponse)
async def irrigation_advice(
    request: IrrigationRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    advice = await service.irrigation_advice(
        crop=request.crop,
        stage=request.stage,
        moisture=request.moisture,
        location=request.location,
        language=request.language,
    )
    return IrrigationResponse(advice=advice)


@router.post("/market", response_model=Grounded[MarketAnalysisResult])
async def market_analysis(
    request: MarketRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    """Price trend and sell/hold advice, grounded on web search."""
    return await service.market_analysis(
        query=request.query,
        category=request.category,
        period=request.period,
        location=request.location,
        language=request.language,
    )


@router.post(
    "/soil",
    response_model=SoilAnalysisResult,
    response_model_exclude_none=True,
)
async def analyze_soil(
    request: SoilRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    return await service.analyze_soil(
        sample=request.sample, location=request.location, language=request.language
    )


@router.post("/suppliers", response_model=Grounded[SupplierSearchResult])
async def find_suppliers(
    request: SupplierRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    """Nearby input suppliers, grounded on maps and search."""
    return await service.find_suppliers(
        query=request.query, location=request.location, language=request.language
    )


@router.post("/pest-risk", response_model=Grounded[PestRiskAssessment])
async def pest_risk(
    request: PestRiskRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    return await service.pest_risk(
        crop=request.crop,
        stage=request.stage,
        location=request.location,
        language=request.language,
    )


@router.post("/weather", response_model=Grounded[WeatherTip])
async def weather_tip(
    request: WeatherRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    return await service.weather_tip(location=request.location, language=request.language)


@router.post("/fertilizer-schedule", response_model=FertilizerSchedule)
async def fertilizer_schedule(
    request: FertilizerScheduleRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    return await service.fertilizer_schedule(
        crop=request.crop,
        stage=request.stage,
        soil_ph=request.soil_ph,
        language=request.language,
    )


@router.post(
    "/crop-plan",
    response_model=CropPlanResult,
    response_model_exclude_none=True,
)
async def plan_crops(
    request: CropPlanRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    return await service.plan_crops(
        mode=request.mode,
        soil_type=request.soil_type,
        filters=request.filters,
        crop_input=request.crop_input,
        location=request.location,
        language=request.language,
        profile=request.profile,
    )
