from __future__ import annotations

import hashlib
import hmac
import json

from voicerouter.core.error_codes import ErrorCode
from voicerouter.core.webhooks import (
    AssemblyAIWebhookHandler,
    AzureWebhookHandler,
    DeepgramWebhookHandler,
    GladiaWebhookHandler,
    MeetingBaasWebhookHandler,
    SpeechmaticsWebhookHandler,
    VexaWebhookHandler,
    WebhookVerificationOptions,
)


def _sign(secret: str, body: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


# -------------------------
# Gladia
# -------------------------
def test_gladia_webhook_success_without_result() -> None:
    payload = {"event": "transcription.success", "payload": {"id": "job-1"}}

    event = GladiaWebhookHandler().parse(payload)

    assert event.success is True
    assert event.event_type == "transcription.completed"
    assert event.transcript_id == "job-1"
    assert event.status == "completed"
    assert event.data is None


def test_gladia_callback_embeds_transcript() -> None:
    payload = {
        "id": "job-2",
        "event": "transcription.success",
        "payload": {
            "transcription": {
                "full_transcript": "hello world",
                "utterances": [{"speaker": 0, "text": "hello world", "start": 0, "end": 1}],
            }
        },
    }

    event = GladiaWebhookHandler().parse(payload)

    assert event.data is not None
    assert event.data.id == "job-2"
    assert event.data.text == "hello world"
    assert event.data.status == "completed"


def test_gladia_created_and_error_events() -> None:
    handler = GladiaWebhookHandler()

    created = handler.parse({"event": "transcription.created", "payload": {"id": "j"}})
    failed = handler.parse({"event": "transcription.error", "payload": {"id": "j", "error": "bad audio"}})

    assert created.event_type == "transcription.created"
    assert created.status == "queued"
    assert failed.success is False
    assert failed.event_type == "transcription.failed"
    assert failed.error.code is ErrorCode.TRANSCRIPTION_ERROR
    assert failed.error.message == "bad audio"


def test_unparseable_payload_is_failed_event_not_exception() -> None:
    for handler in (GladiaWebhookHandler(), AssemblyAIWebhookHandler(), DeepgramWebhookHandler(), AzureWebhookHandler()):
        event = handler.parse("not json at all")
        assert event.success is False
        assert event.event_type == "transcription.failed"
        assert event.error.code is ErrorCode.PARSE_ERROR


# -------------------------
# AssemblyAI
# -------------------------
def test_assemblyai_completed_and_error() -> None:
    handler = AssemblyAIWebhookHandler()

    done = handler.parse({"transcript_id": "t-1", "status": "completed"})
    err = handler.parse({"transcript_id": "t-2", "status": "error"})

    assert done.event_type == "transcription.completed"
    assert done.transcript_id == "t-1"
    assert done.data is None
    assert err.success is False
    assert err.transcript_id == "t-2"


def test_assemblyai_signature_uses_raw_body() -> None:
    handler = AssemblyAIWebhookHandler()
    body = b'{"transcript_id": "t-1", "status": "completed"}'
    payload = json.loads(body)

    good = WebhookVerificationOptions(signature=_sign("s3cret", body), secret="s3cret", raw_body=body)
    bad = WebhookVerificationOptions(signature=_sign("other", body), secret="s3cret", raw_body=body)
    missing = WebhookVerificationOptions(secret="s3cret", raw_body=body)

    assert handler.verify(payload, good) is True
    assert handler.verify(payload, bad) is False
    assert handler.verify(payload, missing) is False


def test_signature_falls_back_to_compact_json() -> None:
    payload = {"transcript_id": "t-1", "status": "completed"}
    compact = json.dumps(payload, separators=(",", ":")).encode("utf-8")

    opts = WebhookVerificationOptions(signature=_sign("k", compact).upper(), secret="k")

    assert AssemblyAIWebhookHandler().verify(payload, opts) is True


# -------------------------
# Deepgram
# -------------------------
def test_deepgram_callback_maps_full_transcript(load_fixture) -> None:
    payload = load_fixture("deepgram_listen.json")

    event = DeepgramWebhookHandler().parse(payload)

    assert event.success is True
    assert event.event_type == "transcription.completed"
    assert event.transcript_id == "a847f427-4ad5-4d67-9b95-db801e58251c"
    assert event.data.text == "hey how are you"


def test_deepgram_empty_transcript_is_failure() -> None:
    payload = {
        "metadata": {"request_id": "r-1"},
        "results": {"channels": [{"alternatives": [{"transcript": "", "words": []}]}]},
    }

    event = DeepgramWebhookHandler().parse(payload)

    assert event.success is False
    assert event.transcript_id == "r-1"
    assert event.error.code is ErrorCode.NO_RESULTS


def test_deepgram_without_alternatives_is_failure() -> None:
    event = DeepgramWebhookHandler().parse({"metadata": {"request_id": "r-2"}, "results": {"channels": []}})

    assert event.success is False
    assert event.transcript_id == "r-2"
    assert event.error.code is ErrorCode.NO_RESULTS


# -------------------------
# Azure
# -------------------------
def _azure(action: str, **extra):
    payload = {
        "action": action,
        "timestamp": "2024-05-02T10:00:00Z",
        "self": "https://westus.api.cognitive.microsoft.com/speechtotext/v3.2/transcriptions/tr-9?api-version=3.2",
    }
    payload.update(extra)
    return payload


def test_azure_actions_map_to_event_types() -> None:
    handler = AzureWebhookHandler()

    assert handler.parse(_azure("TranscriptionCreated")).event_type == "transcription.created"
    assert handler.parse(_azure("TranscriptionRunning")).event_type == "transcription.processing"
    succeeded = handler.parse(_azure("TranscriptionSucceeded"))
    assert succeeded.event_type == "transcription.completed"
    assert succeeded.transcript_id == "tr-9"
    assert succeeded.timestamp == "2024-05-02T10:00:00Z"


def test_azure_failed_action_carries_error_message() -> None:
    event = AzureWebhookHandler().parse(
        _azure("TranscriptionFailed", error={"code": "InvalidData", "message": "Audio format unsupported"})
    )

    assert event.success is False
    assert event.error.message == "Audio format unsupported"
    assert event.error.details == {"error_code": "InvalidData"}


def test_azure_unknown_action_is_parse_error() -> None:
    event = AzureWebhookHandler().parse(_azure("TranscriptionDeleted"))

    assert event.success is False
    assert event.error.code is ErrorCode.PARSE_ERROR


def test_azure_unsigned_delivery_passes_but_bad_signature_fails() -> None:
    handler = AzureWebhookHandler()
    body = json.dumps(_azure("TranscriptionSucceeded")).encode("utf-8")

    assert handler.verify({}, WebhookVerificationOptions(secret="k", raw_body=body)) is True
    assert handler.verify({}, WebhookVerificationOptions(signature="00", secret="k", raw_body=body)) is False
    assert handler.verify({}, WebhookVerificationOptions(signature=_sign("k", body), secret="k", raw_body=body)) is True


# -------------------------
# Speechmatics
# -------------------------
def test_speechmatics_validate_requires_query_params() -> None:
    handler = SpeechmaticsWebhookHandler()

    assert handler.validate({}, query_params=None).error == "Missing required query parameter: id"
    assert handler.validate({}, query_params={"id": "j"}).error == "Missing required query parameter: status"
    assert handler.validate({}, query_params={"id": "j", "status": "meh"}).error == "Invalid status value: meh"
    assert handler.validate({"job": {}}, query_params={"id": "j", "status": "success"}).valid is True


def test_speechmatics_user_agent_mismatch() -> None:
    handler = SpeechmaticsWebhookHandler()
    params = {"id": "j", "status": "success"}

    assert handler.matches({"job": {}}, query_params=params, user_agent="curl/8.0") is False
    assert handler.matches({"job": {}}, query_params=params, user_agent="Speechmatics-API/2.0") is True
    assert handler.validate({"job": {}}, query_params=params, user_agent="curl/8.0").valid is False


def test_speechmatics_success_with_transcript(load_fixture) -> None:
    event = SpeechmaticsWebhookHandler().parse(
        load_fixture("speechmatics_json_v2.json"),
        query_params={"id": "r6sjc5m1jz", "status": "success"},
    )

    assert event.success is True
    assert event.event_type == "transcription.completed"
    assert event.transcript_id == "r6sjc5m1jz"
    assert event.data.text == "Hello. Hi there"


def test_speechmatics_success_without_body() -> None:
    event = SpeechmaticsWebhookHandler().parse({}, query_params={"id": "j-3", "status": "success"})

    assert event.success is True
    assert event.transcript_id == "j-3"
    assert event.status == "completed"
    assert event.data is None


def test_speechmatics_error_statuses() -> None:
    event = SpeechmaticsWebhookHandler().parse({}, query_params={"id": "j-4", "status": "fetch_error"})

    assert event.success is False
    assert event.event_type == "transcription.failed"
    assert event.transcript_id == "j-4"
    assert event.error.details == {"notification_status": "fetch_error"}


# -------------------------
# Meeting bots
# -------------------------
def test_vexa_status_push() -> None:
    handler = VexaWebhookHandler()
    base = {"id": 5, "platform": "teams", "native_meeting_id": "m-1"}

    active = handler.parse({**base, "status": "active"})
    done = handler.parse(
        {**base, "status": "completed", "segments": [{"start": 0, "end": 1, "text": "hi", "speaker": "Eve"}]}
    )
    failed = handler.parse({**base, "status": "failed", "error": "kicked"})

    assert active.event_type == "transcription.processing"
    assert active.transcript_id == "5"
    assert done.event_type == "transcription.completed"
    assert done.data.text == "hi"
    assert failed.success is False
    assert failed.error.message == "kicked"


def test_meeting_baas_complete_event() -> None:
    payload = {
        "event": "complete",
        "data": {
            "bot_id": "b-1",
            "mp4": "https://s3.example.com/b-1.mp4",
            "speakers": ["Fay"],
            "transcript": [
                {"speaker": "Fay", "start_time": 0.0, "end_time": 1.0, "words": [{"text": "Bye", "start_time": 0.0, "end_time": 1.0}]}
            ],
        },
    }

    event = MeetingBaasWebhookHandler().parse(payload)

    assert event.success is True
    assert event.event_type == "transcription.completed"
    assert event.transcript_id == "b-1"
    assert event.data.text == "Bye"
    assert [s.id for s in event.data.speakers] == ["Fay"]


def test_meeting_baas_complete_event_without_transcript() -> None:
    event = MeetingBaasWebhookHandler().parse({"event": "complete", "data": {"bot_id": "b-2", "transcript": []}})

    assert event.data.status == "completed"
    assert event.data.text is None


def test_meeting_baas_failed_and_status_change() -> None:
    handler = MeetingBaasWebhookHandler()

    failed = handler.parse({"event": "failed", "data": {"bot_id": "b-1", "error": "CannotJoinMeeting"}})
    joining = handler.parse(
        {"event": "bot.status_change", "data": {"bot_id": "b-1", "status": {"code": "joining_call", "created_at": "t0"}}}
    )
    recording = handler.parse(
        {"event": "bot.status_change", "data": {"bot_id": "b-1", "status": {"code": "in_call_recording"}}}
    )

    assert failed.success is False
    assert failed.error.message == "CannotJoinMeeting"
    assert joining.event_type == "transcription.created"
    assert joining.timestamp == "t0"
    assert recording.event_type == "transcription.processing"


def test_non_ascii_signature_is_a_mismatch_not_an_error() -> None:
    body = b'{"transcript_id": "t-1", "status": "completed"}'
    opts = WebhookVerificationOptions(signature="café", secret="s3cret", raw_body=body)

    assert AssemblyAIWebhookHandler().verify(json.loads(body), opts) is False
    assert AzureWebhookHandler().verify({}, opts) is False


def test_deepgram_non_string_request_id() -> None:
    numeric = {
        "metadata": {"request_id": 42},
        "results": {"channels": [{"alternatives": [{"transcript": "", "words": []}]}]},
    }
    nested = {"metadata": {"request_id": {"id": "r"}}, "results": {"channels": []}}

    numeric_event = DeepgramWebhookHandler().parse(numeric)
    nested_event = DeepgramWebhookHandler().parse(nested)

    assert numeric_event.transcript_id == "42"
    assert numeric_event.error.code is ErrorCode.NO_RESULTS
    assert nested_event.transcript_id is None
    assert nested_event.error.code is ErrorCode.NO_RESULTS
    assert DeepgramWebhookHandler().validate(nested).valid is True
