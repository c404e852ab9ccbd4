import logging
import re
from typing import Any, Iterable, List

from pydantic import BaseModel, ValidationError

from agriwise.core.exceptions import ErrorKind
from agriwise.models.advice import SpeechAudio
from agriwise.models.request_spec import RequestSpec, ResponseModality
from agriwise.models.result import (
    Err,
    GroundingKind,
    GroundingSource,
    Ok,
    TypedResult,
    UpstreamResponse,
)

logger = logging.getLogger(__name__)

FALLBACK_TEXT = "I could not generate a response right now. Please try again."

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def strip_code_fence(payload: str) -> str:
    payload = payload.strip()
    match = _CODE_FENCE.match(payload)
    return match.group(1).strip() if match else payload


def _review_snippets(maps: dict) -> List[str]:
    answer_sources = maps.get("place_answer_sources") or []
    if isinstance(answer_sources, dict):
        answer_sources = [answer_sources]

    snippets = []
    for answer_source in answer_sources:
        for review in (answer_source or {}).get("review_snippets") or []:
            review = review or {}
            snippet = review.get("review") or review.get("snippet") or review.get("text")
            if snippet:
                snippets.append(snippet)
    return snippets


def extract_grounding(chunks: Iterable[dict]) -> List[GroundingSource]:
    """Turn raw grounding chunks into sources, one per URI."""
    sources: List[GroundingSource] = []
    seen = set()
    for chunk in chunks:
        if not isinstance(chunk, dict):
            continue
        for kind in (GroundingKind.WEB, GroundingKind.MAPS):
            data = chunk.get(kind.value)
            if not isinstance(data, dict):
                continue
            uri = data.get("uri")
            if not uri or uri in seen:
                continue
            seen.add(uri)
            sources.append(
                GroundingSource(
                    kind=kind,
                    uri=uri,
                    title=data.get("title"),
                    snippets=_review_snippets(data) if kind == GroundingKind.MAPS else [],
                )
            )
    return sources


def decode_text(response: UpstreamResponse) -> TypedResult[str]:
    text = (response.text or "").strip()
    if not text:
        logger.warning(
            "Upstream returned no text (finish_reason=%s), using fallback",
            response.finish_reason,
        )
        text = FALLBACK_TEXT
    return Ok(text, tuple(extract_grounding(response.grounding_chunks)))


def decode_structured(
    response: UpstreamResponse, shape: type[BaseModel]
) -> TypedResult[Any]:
    payload = strip_code_fence(response.text or "")
    if not payload:
        return Err(ErrorKind.PARSE_ERROR, f"Empty payload for {shape.__name__}.")
    try:
        value = shape.model_validate_json(payload)
    except ValidationError as exc:
        logger.warning(
            "Payload did not match %s: %d validation error(s)",
            shape.__name__,
            exc.error_count(),
        )
        return Err(
            ErrorKind.PARSE_ERROR,
            f"Response did not match {shape.__name__}: {exc.errors()[0]['msg']}",
        )
    return Ok(value, tuple(extract_grounding(response.grounding_chunks)))


def decode_audio(response: UpstreamResponse) -> TypedResult[SpeechAudio]:
    for mime_type, data in response.inline_data:
        if mime_type.startswith("audio/") and data:
            return Ok(SpeechAudio(data=data, mime_type=mime_type))
    return Err(ErrorKind.PARSE_ERROR, "Response did not contain any audio.")


def decode(response: UpstreamResponse, spec: RequestSpec) -> TypedResult[Any]:
    """Single crossing from the untyped upstream payload to a typed result."""
    if spec.response_modality == ResponseModality.AUDIO:
        return decode_audio(response)
    if spec.output_shape is None:
        return decode_text(response)
    return decode_structured(response, spec.output_shape)
