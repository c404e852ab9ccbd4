import base64
import binascii
import hashlib
import json
import re
from enum import Enum
from functools import lru_cache
from typing import Any, Iterable, Mapping, Optional, Sequence

from langchain_core.prompts import PromptTemplate
from pydantic import BaseModel

from agriwise.core.config import settings
from agriwise.core.exceptions import InvalidAttachment
from agriwise.core.localization import get_language_name, resolve_language_code
from agriwise.models.farm_profile import FarmerProfile, Location
from agriwise.models.inputs import Attachment, ChatTurn
from agriwise.models.request_spec import (
    ContentPart,
    HistoryTurn,
    RequestSpec,
    ResponseModality,
    TaskKind,
    ToolKind,
)
from agriwise.prompts.advisor_system_prompt import (
    ADVISOR_PERSONA,
    COMPLIANCE_CONSTRAINTS,
    LOCALIZATION_INSTRUCTION,
    PROFILE_CONTEXT_TEMPLATE,
)

_WHITESPACE = re.compile(r"\s+")
_DATA_URL_PREFIX = re.compile(r"^data:[^;,]*;base64,", re.IGNORECASE)


@lru_cache(maxsize=64)
def _template(template: str) -> PromptTemplate:
    return PromptTemplate.from_template(template)


def render_prompt(template: str, **values: Any) -> str:
    return _template(template).format(**values)


def describe_location(location: Optional[Location]) -> str:
    return location.describe() if location else "Unknown"


def summarize_profile(profile: FarmerProfile) -> str:
    sentences = []
    if profile.land_size_acres is not None:
        sentences.append(f"The farmer manages {profile.land_size_acres:g} acres of land.")
    if profile.soil_type is not None:
        sentences.append(f"The dominant soil type is {profile.soil_type.value}.")
    if profile.active_crops:
        sentences.append(
            f"Crops currently in the field: {', '.join(profile.active_crops)}."
        )
    return " ".join(sentences)


def decode_attachment(attachment: Attachment) -> ContentPart:
    mime_type = (attachment.mime_type or "").strip().lower()
    if not mime_type:
        raise InvalidAttachment("Attachment is missing its mime type.")
    if "/" not in mime_type:
        raise InvalidAttachment(f"Attachment mime type {mime_type!r} is not valid.")

    data = attachment.data
    if isinstance(data, str):
        encoded = _DATA_URL_PREFIX.sub("", data.strip())
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidAttachment("Attachment is not valid base64.") from exc

    if not data:
        raise InvalidAttachment("Attachment is empty.")
    return ContentPart.from_bytes(data=data, mime_type=mime_type)


def _normalize(value: Any, precision: int, fold_case: bool = True) -> Any:
    if isinstance(value, str) and not isinstance(value, Enum):
        text = _WHITESPACE.sub(" ", value).strip()
        return text.lower() if fold_case else text
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Location):
        return list(value.rounded(precision))
    if isinstance(value, Attachment):
        return decode_attachment_digest(value)
    if isinstance(value, (bytes, bytearray)):
        return hashlib.sha256(value).hexdigest()
    if isinstance(value, BaseModel):
        return {
            name: _normalize(getattr(value, name), precision, fold_case)
            for name in type(value).model_fields
        }
    if isinstance(value, float):
        return round(value, precision)
    if isinstance(value, Mapping):
        return {str(k): _normalize(v, precision, fold_case) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_normalize(v, precision, fold_case) for v in value]
        if isinstance(value, (set, frozenset)):
            items.sort(key=repr)
        return items
    return value


def decode_attachment_digest(attachment: Attachment) -> str:
    part = decode_attachment(attachment)
    return hashlib.sha256(part.inline_data.data).hexdigest()


class RequestBuilder:
    """Turns task arguments into a deterministic RequestSpec."""

    def __init__(
        self,
        *,
        text_model: Optional[str] = None,
        speech_model: Optional[str] = None,
        coordinate_precision: Optional[int] = None,
    ) -> None:
        self.text_model = text_model or settings.TEXT_MODEL
        self.speech_model = speech_model or settings.SPEECH_MODEL
        self.coordinate_precision = (
            settings.COORDINATE_PRECISION
            if coordinate_precision is None
            else coordinate_precision
        )

    def compose_directive(
        self,
        language_name: str,
        task_instruction: str = "",
        profile: Optional[FarmerProfile] = None,
    ) -> str:
        sections = [
            ADVISOR_PERSONA,
            COMPLIANCE_CONSTRAINTS,
            render_prompt(LOCALIZATION_INSTRUCTION, language=language_name),
        ]
        if profile is not None and not profile.is_empty():
            sections.append(
                render_prompt(
                    PROFILE_CONTEXT_TEMPLATE,
                    profile_summary=summarize_profile(profile),
                )
            )
        if task_instruction:
            sections.append(task_instruction)
        return "\n\n".join(sections)

    def cache_key(
        self,
        task_kind: TaskKind,
        language: str,
        inputs: Mapping[str, Any],
        preserve_case: bool = False,
    ) -> str:
        """Key for in-flight sharing.

        Text is compared case-insensitively unless ``preserve_case`` is set, for
        tasks whose output reproduces the input wording.
        """
        payload = {
            "task": task_kind.value,
            "language": language,
            "inputs": _normalize(
                dict(inputs), self.coordinate_precision, fold_case=not preserve_case
            ),
        }
        digest = hashlib.sha256(
            json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
        ).hexdigest()
        return f"{task_kind.value}:{digest}"

    def build(
        self,
        task_kind: TaskKind,
        *,
        prompt: str,
        language: Optional[str],
        task_instruction: str = "",
        attachment: Optional[Attachment] = None,
        profile: Optional[FarmerProfile] = None,
        history: Sequence[ChatTurn] = (),
        output_shape: Optional[type[BaseModel]] = None,
        tools: Iterable[ToolKind] = (),
        response_modality: ResponseModality = ResponseModality.TEXT,
        cache_inputs: Optional[Mapping[str, Any]] = None,
        preserve_case: bool = False,
    ) -> RequestSpec:
        language_code = resolve_language_code(language)
        language_name = get_language_name(language_code)

        parts = [ContentPart.from_text(prompt)]
        if attachment is not None:
            parts.append(decode_attachment(attachment))

        if cache_inputs is None:
            cache_inputs = {"prompt": prompt, "attachment": attachment}

        return RequestSpec(
            task_kind=task_kind,
            model=(
                self.speech_model
                if response_modality == ResponseModality.AUDIO
                else self.text_model
            ),
            language=language_code,
            system_directive=self.compose_directive(
                language_name, task_instruction, profile
            ),
            parts=tuple(parts),
            history=tuple(HistoryTurn(role=turn.role, text=turn.text) for turn in history),
            output_shape=output_shape,
            tools_enabled=frozenset(tools),
            response_modality=response_modality,
            cache_key=self.cache_key(
                task_kind, language_code, cache_inputs, preserve_case=preserve_case
            ),
        )
