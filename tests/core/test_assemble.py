from __future__ import annotations

import pydantic
import pytest

from voicerouter.core.assemble import normalize_exception, normalize_response
from voicerouter.core.error_codes import ErrorCode
from voicerouter.core.errors import TransportError, create_error
from voicerouter.core_types import TranscriptData, UnifiedTranscriptResponse


def test_gladia_minimal_payload_end_to_end() -> None:
    raw = {
        "status": "done",
        "result": {
            "transcription": {
                "full_transcript": "hello world",
                "utterances": [{"speaker": 0, "text": "hello world", "start": 0, "end": 1}],
            }
        },
    }

    res = normalize_response("gladia", raw)

    assert res.success is True
    assert res.error is None
    assert res.data is not None
    assert res.data.status == "completed"
    assert res.data.text == "hello world"
    assert [(s.id, s.label) for s in res.data.speakers] == [("0", "Speaker 0")]
    assert res.raw is raw


def test_transport_rejection_401_end_to_end() -> None:
    exc = TransportError("Request failed with status code 401", status_code=401, body={"message": "Invalid API key"})

    res = normalize_exception("assemblyai", exc)

    assert res.success is False
    assert res.data is None
    assert res.error is not None
    assert res.error.status_code == 401
    assert res.error.code is ErrorCode.UNKNOWN_ERROR
    assert res.raw == {"message": "Invalid API key"}


def test_normalize_exception_explicit_raw_and_default_code() -> None:
    res = normalize_exception("deepgram", TimeoutError("timed out"), raw={"partial": True}, default_code="CONNECTION_TIMEOUT")

    assert res.error.code is ErrorCode.CONNECTION_TIMEOUT
    assert res.error.message == "timed out"
    assert res.raw == {"partial": True}


def test_rejected_call_body_becomes_failure_envelope() -> None:
    body = {"message": "audio_url is not reachable", "code": "INVALID_INPUT"}

    res = normalize_response("gladia", body, success=False, http_status=400)

    assert res.success is False
    assert res.data is None
    assert res.error.code is ErrorCode.INVALID_INPUT
    assert res.error.message == "audio_url is not reachable"
    assert res.error.status_code == 400
    assert res.raw == body


def test_rejected_call_with_foreign_code_is_unknown_error() -> None:
    res = normalize_response("deepgram", {"err_code": "INVALID_AUTH", "err_msg": "bad key"}, success=False, http_status=401)

    assert res.error.code is ErrorCode.UNKNOWN_ERROR
    assert res.error.message == "An unknown error occurred"
    assert res.error.status_code == 401


@pytest.mark.parametrize("raw", ["<html>502</html>", None, [1, 2, 3], 42])
def test_non_object_payload_is_parse_error(raw: object) -> None:
    res = normalize_response("gladia", raw)

    assert res.success is False
    assert res.error.code is ErrorCode.PARSE_ERROR
    assert res.error.details == {"payload_type": type(raw).__name__}
    assert res.raw == raw


def test_mapper_crash_is_parse_error(monkeypatch: pytest.MonkeyPatch) -> None:
    from voicerouter.core.providers import registry

    class Exploding:
        provider = "vexa"

        def map_transcript(self, raw):
            raise ValueError("segments corrupted")

    monkeypatch.setitem(registry._MAPPERS, "vexa", Exploding())

    res = normalize_response("vexa", {"segments": []}, http_status=200)

    assert res.success is False
    assert res.error.code is ErrorCode.PARSE_ERROR
    assert res.error.message == "segments corrupted"
    assert res.error.status_code == 200


def test_unsupported_provider_raises_key_error() -> None:
    with pytest.raises(KeyError):
        normalize_response("whisper-cpp", {})
    with pytest.raises(KeyError):
        normalize_exception("whisper-cpp", RuntimeError("x"))


def test_failure_envelope_never_carries_data() -> None:
    with pytest.raises(pydantic.ValidationError):
        UnifiedTranscriptResponse(
            success=False,
            provider="gladia",
            data=TranscriptData(id="x", status="error"),
            error=create_error("TRANSCRIPTION_ERROR"),
        )
    with pytest.raises(pydantic.ValidationError):
        UnifiedTranscriptResponse(success=False, provider="gladia")
    with pytest.raises(pydantic.ValidationError):
        UnifiedTranscriptResponse(success=True, provider="gladia", error=create_error("PARSE_ERROR"))


def test_extended_must_match_provider() -> None:
    with pytest.raises(pydantic.ValidationError):
        UnifiedTranscriptResponse(
            success=True,
            provider="deepgram",
            data=TranscriptData(id="x", status="completed"),
            extended={"provider": "gladia"},
        )


def test_negative_duration_is_rejected() -> None:
    with pytest.raises(pydantic.ValidationError):
        TranscriptData(id="x", status="completed", duration=-1)


def test_absent_fields_stay_absent_not_empty() -> None:
    res = normalize_response("gladia", {"id": "job-1", "status": "queued"})

    assert res.success is True
    assert res.data.status == "queued"
    assert res.data.text is None
    assert res.data.words is None
    assert res.data.utterances is None
    assert res.data.speakers is None
