from __future__ import annotations

import pytest

from voicerouter.core.assemble import normalize_response
from voicerouter.core.error_codes import ErrorCode


def test_completed_transcript_converts_milliseconds(load_fixture) -> None:
    res = normalize_response("assemblyai", load_fixture("assemblyai_completed.json"))

    data = res.data
    assert data.status == "completed"
    assert data.text == "Hello there. Hi."
    assert data.language == "en_us"
    assert data.duration == 3.0
    assert data.words[0].start == pytest.approx(0.24)
    assert data.words[0].end == pytest.approx(0.6)
    assert data.utterances[1].start == pytest.approx(1.5)
    assert [(s.id, s.label) for s in data.speakers] == [("A", "A"), ("B", "B")]
    assert data.metadata == {"audio_url": "https://files.example.com/hello.mp3", "speech_model": "best"}
    assert res.extended.chapters == [{"headline": "Greeting", "start": 240, "end": 1800}]
    # empty lists are treated as absent
    assert res.extended.entities is None


def test_error_carries_provider_message() -> None:
    res = normalize_response("assemblyai", {"id": "t", "status": "error", "error": "Download error, unable to download"})

    assert res.success is False
    assert res.error.code is ErrorCode.TRANSCRIPTION_ERROR
    assert res.error.message == "Download error, unable to download"


def test_queued_transcript() -> None:
    res = normalize_response("assemblyai", {"id": "t", "status": "queued", "text": None, "words": None})

    assert res.data.status == "queued"
    assert res.data.text is None
    assert res.data.words is None
    assert res.data.speakers is None


def test_malformed_side_channel_does_not_drop_transcript() -> None:
    raw = {"id": "t1", "status": "completed", "text": "hello", "chapters": {"oops": 1}, "entities": "n/a"}

    res = normalize_response("assemblyai", raw)

    assert res.success is True
    assert res.data.text == "hello"
    assert res.extended.chapters == {"oops": 1}
    assert res.extended.entities == "n/a"


@pytest.mark.parametrize("duration", ["nan", "inf", float("-inf"), 10**400, "ten"])
def test_unusable_duration_is_absent(duration) -> None:
    res = normalize_response("assemblyai", {"id": "t1", "status": "completed", "text": "hi", "audio_duration": duration})

    assert res.success is True
    assert res.data.duration is None


def test_out_of_order_words_and_utterances_are_sorted() -> None:
    raw = {
        "id": "t1",
        "status": "completed",
        "text": "b a",
        "words": [
            {"text": "b", "start": 500, "end": 700, "speaker": "A"},
            {"text": "a", "start": 0, "end": 200, "speaker": "B"},
        ],
        "utterances": [
            {"text": "b", "start": 500, "end": 700, "speaker": "A"},
            {"text": "a", "start": 0, "end": 200, "speaker": "B"},
        ],
    }

    data = normalize_response("assemblyai", raw).data

    assert [w.start for w in data.words] == [0.0, 0.5]
    assert [u.text for u in data.utterances] == ["a", "b"]
    # first-seen in chronological order
    assert [s.id for s in data.speakers] == ["B", "A"]
