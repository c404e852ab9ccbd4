from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from agriwise.api.dependencies import get_advisory_service
from agriwise.models.advice import ChatReply, SpeechAudio
from agriwise.models.farm_profile import FarmerProfile, Location
from agriwise.models.inputs import ChatTurn
from agriwise.services.advisory_service import AdvisoryService

router = APIRouter(prefix="/chat", tags=["Chat"])


class ChatRequest(BaseModel):
    message: str
    history: List[ChatTurn] = Field(default_factory=list)
    language: str = "en"
    location: Optional[Location] = None
    profile: Optional[FarmerProfile] = None


class TextRequest(BaseModel):
    text: str
    language: str = "en"


class SummaryResponse(BaseModel):
    summary: str


@router.post("", response_model=ChatReply)
async def chat_with_advisor(
    request: ChatRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    """One conversational turn with the advisor. History is sent by the client."""
    return await service.chat(
        message=request.message,
        history=request.history,
        language=request.language,
        location=request.location,
        profile=request.profile,
    )


@router.post("/summarize", response_model=SummaryResponse)
async def summarize(
    request: TextRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    summary = await service.summarize(text=request.text, language=request.language)
    return SummaryResponse(summary=summary)


@router.post("/speech", response_model=SpeechAudio)
async def synthesize_speech(
    request: TextRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    """Speech for an advisor message, base64 encoded in the JSON body."""
    return await service.synthesize_speech(text=request.text, language=request.language)


@router.post("/speech/raw", response_class=Response)
async def synthesize_speech_raw(
    request: TextRequest,
    service: AdvisoryService = Depends(get_advisory_service),
):
    audio = await service.synthesize_speech(text=request.text, language=request.language)
    return Response(content=audio.data, media_type=audio.mime_type)
