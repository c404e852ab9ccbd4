import asyncio
import json
from typing import Any, List, Optional
from unittest.mock import AsyncMock

from agriwise.models.request_spec import RequestSpec
from agriwise.models.result import UpstreamResponse
from agriwise.services.advisory_service import AdvisoryService
from agriwise.services.dedup_cache import InFlightCache
from agriwise.services.request_builder import RequestBuilder
from agriwise.services.retrying_executor import RetryingExecutor


class StatusError(Exception):
    """Stand-in for an HTTP error raised by an SDK, carrying a status code."""

    def __init__(self, code: int, message: str = "upstream error") -> None:
        super().__init__(f"{code} {message}")
        self.code = code


class FakeUpstream:
    """Replays scripted responses; the last one repeats once the script runs out."""

    def __init__(self, *responses: Any, gate: Optional[asyncio.Event] = None) -> None:
        self.responses: List[Any] = list(responses) or [UpstreamResponse(text="ok")]
        self.gate = gate
        self.calls: List[RequestSpec] = []

    async def generate(self, spec: RequestSpec) -> UpstreamResponse:
        self.calls.append(spec)
        if self.gate is not None:
            await self.gate.wait()
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, BaseException):
            raise item
        return item


def text_response(text: Optional[str], **kwargs: Any) -> UpstreamResponse:
    return UpstreamResponse(text=text, **kwargs)


def json_response(payload: Any, **kwargs: Any) -> UpstreamResponse:
    return UpstreamResponse(text=json.dumps(payload), **kwargs)


SOIL_PAYLOAD = {
    "analysis": "## Soil report\nGood structure.",
    "health_score": 72.0,
    "typical_n": "Low",
    "typical_p": "Medium",
    "typical_k": "High",
    "normalized_n": 30.0,
    "normalized_p": 55.0,
    "normalized_k": 80.0,
    "companion_advice": "Grow cowpea as a cover crop.",
    "visual_indicators": ["pale topsoil", "surface crusting"],
    "texture_confidence": {"type": "Sandy loam", "score": 84.0},
}

WEB_CHUNK = {"web": {"uri": "https://agmarknet.gov.in/onion", "title": "Agmarknet"}}

MAPS_CHUNK = {
    "maps": {
        "uri": "https://maps.google.com/?cid=42",
        "title": "Green Agro Inputs",
        "place_answer_sources": {
            "review_snippets": [{"review": "Good stock of neem oil."}]
        },
    }
}


def make_executor(upstream: FakeUpstream, sleep: AsyncMock, **kwargs: Any) -> RetryingExecutor:
    kwargs.setdefault("max_retries", 3)
    kwargs.setdefault("base_delay", 1.0)
    kwargs.setdefault("jitter_ratio", 0.25)
    kwargs.setdefault("attempt_timeout", 0)
    return RetryingExecutor(upstream, sleep=sleep, rand=lambda: 0.0, **kwargs)


def make_service(upstream: FakeUpstream, sleep: AsyncMock, builder: RequestBuilder) -> AdvisoryService:
    return AdvisoryService(
        executor=make_executor(upstream, sleep),
        cache=InFlightCache(),
        builder=builder,
    )
