import pytest

from agriwise.core.exceptions import ErrorKind, ParseError
from agriwise.models.advice import SpeechAudio
from agriwise.models.request_spec import ResponseModality, TaskKind
from agriwise.models.result import Err, GroundingKind, Ok, UpstreamResponse
from agriwise.models.soil_analysis import SoilAnalysisResult
from agriwise.services.response_decoder import (
    FALLBACK_TEXT,
    decode,
    decode_structured,
    decode_text,
    extract_grounding,
    strip_code_fence,
)
from tests.helpers import MAPS_CHUNK, SOIL_PAYLOAD, WEB_CHUNK, json_response, text_response


@pytest.mark.parametrize("text", [None, "", "   \n"])
def test_empty_text_uses_fallback(text):
    result = decode_text(text_response(text, finish_reason="SAFETY"))

    assert isinstance(result, Ok)
    assert result.value == FALLBACK_TEXT


def test_text_is_trimmed_and_keeps_sources():
    result = decode_text(text_response("  Irrigate at dawn.\n", grounding_chunks=(WEB_CHUNK,)))

    assert result.value == "Irrigate at dawn."
    assert [source.uri for source in result.sources] == ["https://agmarknet.gov.in/onion"]


def test_structured_payload_is_validated():
    result = decode_structured(json_response(SOIL_PAYLOAD), SoilAnalysisResult)

    assert isinstance(result, Ok)
    assert isinstance(result.value, SoilAnalysisResult)
    assert result.value.model_dump() == SOIL_PAYLOAD


def test_structured_payload_inside_code_fence():
    fenced = "```json\n" + json_response(SOIL_PAYLOAD).text + "\n```"

    result = decode_structured(text_response(fenced), SoilAnalysisResult)

    assert result.value.health_score == 72.0


def test_out_of_range_numbers_pass_through():
    payload = dict(SOIL_PAYLOAD, health_score=150.0, normalized_n=-5.0)

    result = decode_structured(json_response(payload), SoilAnalysisResult)

    assert result.value.health_score == 150.0
    assert result.value.normalized_n == -5.0


def test_optional_fields_may_be_missing():
    payload = {
        key: value
        for key, value in SOIL_PAYLOAD.items()
        if key not in ("visual_indicators", "texture_confidence")
    }

    result = decode_structured(json_response(payload), SoilAnalysisResult)

    assert result.value.visual_indicators is None
    assert result.value.texture_confidence is None


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        '{"analysis": "only this"}',
        "",
        None,
    ],
)
def test_malformed_payload_is_parse_error(text):
    result = decode_structured(text_response(text), SoilAnalysisResult)

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.PARSE_ERROR


def test_err_unwrap_raises_classified_error():
    with pytest.raises(ParseError):
        Err(ErrorKind.PARSE_ERROR, "bad payload").unwrap()


def test_strip_code_fence_leaves_plain_payload():
    assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'
    assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'


def test_grounding_is_deduplicated_by_uri():
    sources = extract_grounding([WEB_CHUNK, MAPS_CHUNK, WEB_CHUNK, {"web": {}}, "junk"])

    assert [source.kind for source in sources] == [GroundingKind.WEB, GroundingKind.MAPS]
    assert sources[0].title == "Agmarknet"
    assert sources[0].snippets == []
    assert sources[1].snippets == ["Good stock of neem oil."]


def test_audio_modality_decodes_first_audio_part(builder):
    spec = builder.build(
        TaskKind.SPEECH,
        prompt="Say hello",
        language="en",
        response_modality=ResponseModality.AUDIO,
    )
    response = UpstreamResponse(
        inline_data=(("image/png", b"img"), ("audio/L16;codec=pcm;rate=24000", b"\x00\x01")),
    )

    result = decode(response, spec)

    assert result.value == SpeechAudio(
        data=b"\x00\x01", mime_type="audio/L16;codec=pcm;rate=24000"
    )


def test_audio_modality_without_audio_is_parse_error(builder):
    spec = builder.build(
        TaskKind.SPEECH,
        prompt="Say hello",
        language="en",
        response_modality=ResponseModality.AUDIO,
    )

    result = decode(text_response("I cannot speak."), spec)

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.PARSE_ERROR


def test_decode_dispatches_on_output_shape(builder):
    text_spec = builder.build(TaskKind.SUMMARIZE, prompt="x", language="en")
    shaped_spec = builder.build(
        TaskKind.SOIL_ANALYSIS, prompt="x", language="en", output_shape=SoilAnalysisResult
    )

    assert decode(text_response("Summary"), text_spec).value == "Summary"
    assert isinstance(
        decode(json_response(SOIL_PAYLOAD), shaped_spec).value, SoilAnalysisResult
    )
