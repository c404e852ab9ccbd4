import logging
from typing import Any, Optional, Sequence

from agriwise.core.localization import get_language_name
from agriwise.models.advice import ChatReply, SpeechAudio
from agriwise.models.crop_plan import CropPlanResult, PlanMode
from agriwise.models.farm_profile import FarmerProfile, Location, SoilType
from agriwise.models.fertilizer_schedule import FertilizerSchedule
from agriwise.models.inputs import Attachment, ChatTurn, CropPlanFilters, SoilSample
from agriwise.models.market import MarketAnalysisResult
from agriwise.models.pest_risk import PestRiskAssessment
from agriwise.models.request_spec import RequestSpec, ResponseModality, TaskKind, ToolKind
from agriwise.models.result import Grounded, Ok, TypedResult
from agriwise.models.soil_analysis import SoilAnalysisResult
from agriwise.models.supplier import SupplierSearchResult
from agriwise.models.weather import WeatherTip
from agriwise.prompts.conversation_prompts import (
    CHAT_INSTRUCTION,
    CHAT_LOCATION_TEMPLATE,
    SPEECH_STYLE,
    SPEECH_USER_TEMPLATE,
    SUMMARIZE_INSTRUCTION,
)
from agriwise.prompts.field_prompts import (
    CROP_PLAN_INSTRUCTION,
    CROP_PLAN_USER_TEMPLATE,
    DIAGNOSIS_INSTRUCTION,
    DIAGNOSIS_USER_TEMPLATE,
    FERTILIZER_SCHEDULE_INSTRUCTION,
    FERTILIZER_SCHEDULE_USER_TEMPLATE,
    IRRIGATION_INSTRUCTION,
    IRRIGATION_USER_TEMPLATE,
    PEST_RISK_INSTRUCTION,
    PEST_RISK_USER_TEMPLATE,
    SOIL_ANALYSIS_INSTRUCTION,
    SOIL_ANALYSIS_USER_TEMPLATE,
)
from agriwise.prompts.market_prompts import (
    MARKET_ANALYSIS_INSTRUCTION,
    MARKET_ANALYSIS_USER_TEMPLATE,
    SUPPLIER_SEARCH_INSTRUCTION,
    SUPPLIER_SEARCH_USER_TEMPLATE,
    WEATHER_INSTRUCTION,
    WEATHER_USER_TEMPLATE,
)
from agriwise.services.dedup_cache import InFlightCache
from agriwise.services.request_builder import (
    RequestBuilder,
    describe_location,
    render_prompt,
)
from agriwise.services.response_decoder import decode
from agriwise.services.retrying_executor import RetryingExecutor

logger = logging.getLogger(__name__)


def _or_unknown(value: Any) -> str:
    if value is None or value == "":
        return "Unknown"
    return str(getattr(value, "value", value))


class AdvisoryService:
    """One coroutine per advisory capability.

    Each call goes builder -> dedup cache (read-style tasks only) -> retrying
    executor -> decoder, and either returns the typed value or raises the
    classified AdvisoryError unchanged.
    """

    def __init__(
        self,
        executor: RetryingExecutor,
        cache: Optional[InFlightCache] = None,
        builder: Optional[RequestBuilder] = None,
    ) -> None:
        self.executor = executor
        self.cache = cache if cache is not None else InFlightCache()
        self.builder = builder if builder is not None else RequestBuilder()

    async def _execute(self, spec: RequestSpec) -> TypedResult[Any]:
        response = await self.executor.execute(spec)
        return decode(response, spec)

    async def _run(self, spec: RequestSpec, *, deduplicate: bool = True) -> Ok[Any]:
        if deduplicate:
            result = await self.cache.run_deduplicated(
                spec.cache_key, lambda: self._execute(spec)
            )
        else:
            result = await self._execute(spec)

        if not isinstance(result, Ok):
            logger.warning(
                "%s response rejected: %s", spec.task_kind.value, result.detail
            )
            raise result.to_exception()
        return result

    async def _grounded(self, spec: RequestSpec) -> Grounded[Any]:
        result = await self._run(spec)
        return Grounded(value=result.value, sources=list(result.sources))

    async def chat(
        self,
        message: str,
        history: Sequence[ChatTurn] = (),
        language: str = "en",
        location: Optional[Location] = None,
        profile: Optional[FarmerProfile] = None,
    ) -> ChatReply:
        instruction = CHAT_INSTRUCTION
        if location is not None:
            instruction += "\n" + render_prompt(
                CHAT_LOCATION_TEMPLATE, location=describe_location(location)
            )
        spec = self.builder.build(
            TaskKind.CHAT,
            prompt=message,
            language=language,
            task_instruction=instruction,
            profile=profile,
            history=history,
            tools=(ToolKind.WEB_SEARCH, ToolKind.MAPS),
        )
        result = await self._run(spec, deduplicate=False)
        return ChatReply(text=result.value, sources=list(result.sources))

    async def diagnose_crop(
        self, image: Attachment, symptoms: str = "", language: str = "en"
    ) -> str:
        spec = self.builder.build(
            TaskKind.DIAGNOSIS,
            prompt=render_prompt(
                DIAGNOSIS_USER_TEMPLATE, symptoms=symptoms or "None described"
            ),
            language=language,
            task_instruction=DIAGNOSIS_INSTRUCTION,
            attachment=image,
        )
        result = await self._run(spec, deduplicate=False)
        return result.value

    async def irrigation_advice(
        self,
        crop: str,
        stage: str,
        moisture: float,
        location: Optional[Location] = None,
        language: str = "en",
    ) -> str:
        spec = self.builder.build(
            TaskKind.IRRIGATION,
            prompt=render_prompt(
                IRRIGATION_USER_TEMPLATE,
                crop=crop,
                stage=stage,
                moisture=f"{moisture:g}",
                location=describe_location(location),
            ),
            language=language,
            task_instruction=IRRIGATION_INSTRUCTION,
            cache_inputs={
                "crop": crop,
                "stage": stage,
                "moisture": moisture,
                "location": location,
            },
        )
        result = await self._run(spec)
        return result.value

    async def market_analysis(
        self,
        query: str,
        category: str = "",
        period: str = "",
        location: Optional[Location] = None,
        language: str = "en",
    ) -> Grounded[MarketAnalysisResult]:
        spec = self.builder.build(
            TaskKind.MARKET_ANALYSIS,
            prompt=render_prompt(
                MARKET_ANALYSIS_USER_TEMPLATE,
                query=query,
                category=_or_unknown(category),
                period=_or_unknown(period),
                location=describe_location(location),
            ),
            language=language,
            task_instruction=MARKET_ANALYSIS_INSTRUCTION,
            output_shape=MarketAnalysisResult,
            tools=(ToolKind.WEB_SEARCH,),
            cache_inputs={
                "query": query,
                "category": category,
                "period": period,
                "location": location,
            },
        )
        return await self._grounded(spec)

    async def analyze_soil(
        self,
        sample: SoilSample,
        location: Optional[Location] = None,
        language: str = "en",
    ) -> SoilAnalysisResult:
        spec = self.builder.build(
            TaskKind.SOIL_ANALYSIS,
            prompt=render_prompt(
                SOIL_ANALYSIS_USER_TEMPLATE,
                location=describe_location(location),
                ph=_or_unknown(sample.ph),
                organic_matter=_or_unknown(sample.organic_matter_percent),
                soil_type=_or_unknown(sample.soil_type),
            ),
            language=language,
            task_instruction=SOIL_ANALYSIS_INSTRUCTION,
            attachment=sample.image,
            output_shape=SoilAnalysisResult,
            cache_inputs={"sample": sample, "location": location},
        )
        result = await self._run(spec)
        return result.value

    async def find_suppliers(
        self,
        query: str,
        location: Location,
        language: str = "en",
    ) -> Grounded[SupplierSearchResult]:
        spec = self.builder.build(
            TaskKind.SUPPLIER_SEARCH,
            prompt=render_prompt(
                SUPPLIER_SEARCH_USER_TEMPLATE,
                query=query,
                location=describe_location(location),
            ),
            language=language,
            task_instruction=SUPPLIER_SEARCH_INSTRUCTION,
            output_shape=SupplierSearchResult,
            tools=(ToolKind.MAPS, ToolKind.WEB_SEARCH),
            cache_inputs={"query": query, "location": location},
        )
        return await self._grounded(spec)

    async def synthesize_speech(self, text: str, language: str = "en") -> SpeechAudio:
        spec = self.builder.build(
            TaskKind.SPEECH,
            prompt=render_prompt(
                SPEECH_USER_TEMPLATE,
                language=get_language_name(language),
                style=SPEECH_STYLE,
                text=text,
            ),
            language=language,
            response_modality=ResponseModality.AUDIO,
            cache_inputs={"text": text},
            preserve_case=True,
        )
        result = await self._run(spec)
        return result.value

    async def pest_risk(
        self,
        crop: str,
        stage: str = "",
        location: Optional[Location] = None,
        language: str = "en",
    ) -> Grounded[PestRiskAssessment]:
        spec = self.builder.build(
            TaskKind.PEST_RISK,
            prompt=render_prompt(
                PEST_RISK_USER_TEMPLATE,
                crop=crop,
                stage=_or_unknown(stage),
                location=describe_location(location),
            ),
            language=language,
            task_instruction=PEST_RISK_INSTRUCTION,
            output_shape=PestRiskAssessment,
            tools=(ToolKind.WEB_SEARCH,),
            cache_inputs={"crop": crop, "stage": stage, "location": location},
        )
        return await self._grounded(spec)

    async def summarize(self, text: str, language: str = "en") -> str:
        spec = self.builder.build(
            TaskKind.SUMMARIZE,
            prompt=text,
            language=language,
            task_instruction=SUMMARIZE_INSTRUCTION,
            cache_inputs={"text": text},
            preserve_case=True,
        )
        result = await self._run(spec)
        return result.value

    async def weather_tip(
        self, location: Location, language: str = "en"
    ) -> Grounded[WeatherTip]:
        spec = self.builder.build(
            TaskKind.WEATHER,
            prompt=render_prompt(
                WEATHER_USER_TEMPLATE, location=describe_location(location)
            ),
            language=language,
            task_instruction=WEATHER_INSTRUCTION,
            output_shape=WeatherTip,
            tools=(ToolKind.WEB_SEARCH,),
            cache_inputs={"location": location},
        )
        return await self._grounded(spec)

    async def fertilizer_schedule(
        self,
        crop: str,
        stage: str,
        soil_ph: Optional[float] = None,
        language: str = "en",
    ) -> FertilizerSchedule:
        spec = self.builder.build(
            TaskKind.FERTILIZER_SCHEDULE,
            prompt=render_prompt(
                FERTILIZER_SCHEDULE_USER_TEMPLATE,
                crop=crop,
                stage=stage,
                soil_ph=_or_unknown(soil_ph),
            ),
            language=language,
            task_instruction=FERTILIZER_SCHEDULE_INSTRUCTION,
            output_shape=FertilizerSchedule,
            cache_inputs={"crop": crop, "stage": stage, "soil_ph": soil_ph},
        )
        result = await self._run(spec)
        return result.value

    async def plan_crops(
        self,
        mode: PlanMode = PlanMode.RECOMMEND,
        soil_type: Optional[SoilType] = None,
        filters: Optional[CropPlanFilters] = None,
        crop_input: str = "",
        location: Optional[Location] = None,
        language: str = "en",
        profile: Optional[FarmerProfile] = None,
    ) -> CropPlanResult:
        filters = filters or CropPlanFilters()
        spec = self.builder.build(
            TaskKind.CROP_PLAN,
            prompt=render_prompt(
                CROP_PLAN_USER_TEMPLATE,
                mode=mode.value,
                soil_type=_or_unknown(soil_type),
                crop_input=_or_unknown(crop_input),
                filters=filters.model_dump_json(exclude_none=True),
                location=describe_location(location),
            ),
            language=language,
            task_instruction=CROP_PLAN_INSTRUCTION,
            profile=profile,
            output_shape=CropPlanResult,
            cache_inputs={
                "mode": mode,
                "soil_type": soil_type,
                "filters": filters,
                "crop_input": crop_input,
                "location": location,
                "profile": profile,
            },
        )
        result = await self._run(spec)
        return result.value
