import json
import logging
from typing import Any, List, Optional

from google.genai import types
from google.genai.client import Client

from agriwise.core.config import settings
from agriwise.models.request_spec import ContentPart, RequestSpec, ResponseModality, ToolKind
from agriwise.models.result import UpstreamResponse

logger = logging.getLogger(__name__)

_raw_google_client: Client | None = None

JSON_WITH_TOOLS_INSTRUCTION = (
    "Return only a JSON object, without any other text, that matches this JSON schema:\n"
)

_TOOLS = {
    ToolKind.WEB_SEARCH: lambda: types.Tool(google_search=types.GoogleSearch()),
    ToolKind.MAPS: lambda: types.Tool(google_maps=types.GoogleMaps()),
}


def get_raw_google_client() -> Client:
    global _raw_google_client
    if _raw_google_client is None:
        _raw_google_client = Client(api_key=settings.GEMINI_API_KEY)
    return _raw_google_client


def _to_genai_part(part: ContentPart) -> types.Part:
    if part.inline_data is not None:
        return types.Part.from_bytes(
            data=part.inline_data.data, mime_type=part.inline_data.mime_type
        )
    return types.Part.from_text(text=part.text or "")


def build_contents(spec: RequestSpec) -> List[types.Content]:
    contents = [
        types.Content(role=turn.role.value, parts=[types.Part.from_text(text=turn.text)])
        for turn in spec.history
    ]
    parts = [_to_genai_part(part) for part in spec.parts]
    if spec.output_shape is not None and spec.tools_enabled:
        # JSON response schemas cannot be combined with search tools, so the
        # schema travels as an instruction instead.
        schema = json.dumps(spec.output_shape.model_json_schema())
        parts.append(types.Part.from_text(text=JSON_WITH_TOOLS_INSTRUCTION + schema))
    contents.append(types.Content(role="user", parts=parts))
    return contents


def build_config(spec: RequestSpec) -> types.GenerateContentConfig:
    config_kwargs: dict[str, Any] = {}

    if spec.response_modality == ResponseModality.AUDIO:
        # TTS models reject system instructions; the prompt carries the language.
        config_kwargs["response_modalities"] = ["AUDIO"]
        config_kwargs["speech_config"] = types.SpeechConfig(
            voice_config=types.VoiceConfig(
                prebuilt_voice_config=types.PrebuiltVoiceConfig(
                    voice_name=settings.SPEECH_VOICE
                )
            )
        )
        return types.GenerateContentConfig(**config_kwargs)

    config_kwargs["system_instruction"] = spec.system_directive
    if spec.tools_enabled:
        config_kwargs["tools"] = [
            _TOOLS[tool]() for tool in sorted(spec.tools_enabled, key=lambda t: t.value)
        ]
    elif spec.output_shape is not None:
        config_kwargs["response_mime_type"] = "application/json"
        config_kwargs["response_schema"] = spec.output_shape
    return types.GenerateContentConfig(**config_kwargs)


def flatten_response(response: types.GenerateContentResponse) -> UpstreamResponse:
    candidates = response.candidates or []
    if not candidates:
        return UpstreamResponse()

    candidate = candidates[0]
    texts: list[str] = []
    inline_data: list[tuple[str, bytes]] = []
    content_parts = (candidate.content.parts if candidate.content else None) or []
    for part in content_parts:
        if part.thought:
            continue
        if part.text:
            texts.append(part.text)
        if part.inline_data is not None and part.inline_data.data:
            inline_data.append(
                (part.inline_data.mime_type or "application/octet-stream", part.inline_data.data)
            )

    grounding_chunks: tuple[dict, ...] = ()
    meta = candidate.grounding_metadata
    if meta is not None and meta.grounding_chunks:
        grounding_chunks = tuple(
            chunk.model_dump(mode="json", exclude_none=True)
            for chunk in meta.grounding_chunks
        )

    finish_reason: Optional[str] = None
    if candidate.finish_reason is not None:
        finish_reason = getattr(candidate.finish_reason, "value", str(candidate.finish_reason))

    return UpstreamResponse(
        text="".join(texts) or None,
        inline_data=tuple(inline_data),
        grounding_chunks=grounding_chunks,
        finish_reason=finish_reason,
    )


class GeminiUpstream:
    """The only place that speaks to the Gemini API."""

    def __init__(self, client: Optional[Client] = None) -> None:
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_raw_google_client()
        return self._client

    async def generate(self, spec: RequestSpec) -> UpstreamResponse:
        logger.debug("Calling %s for %s (%s)", spec.model, spec.task_kind.value, spec.cache_key)
        response = await self.client.aio.models.generate_content(
            model=spec.model,
            contents=build_contents(spec),
            config=build_config(spec),
        )
        return flatten_response(response)
