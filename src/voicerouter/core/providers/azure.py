from __future__ import annotations

from typing import Any, List, Mapping, Optional

from voicerouter.core.error_codes import ErrorCode
from voicerouter.core.errors import create_error
from voicerouter.core.extract import extract_words
from voicerouter.core.providers.base import (
    by_start,
    dig,
    fail,
    items,
    non_negative,
    num,
    obj,
    ok,
    span,
    speaker_ref,
    speakers_of,
    text,
)
from voicerouter.core.status import normalize_status
from voicerouter.core_types import TranscriptData, UnifiedTranscriptResponse, Utterance, Word

# Azure batch transcription reports offsets/durations in 100ns ticks
TICKS_PER_SECOND = 10_000_000
_TICK = 1.0 / TICKS_PER_SECOND


def _ticks_span(offset: Any, duration: Any) -> tuple[float, float]:
    start = num(offset) or 0.0
    return span(start, start + (num(duration) or 0.0), _TICK)


def _phrase_words(phrase: Mapping[str, Any]) -> Optional[List[Word]]:
    speaker = speaker_ref(phrase.get("speaker"))

    def _word(w: Mapping[str, Any]) -> Word:
        start, end = _ticks_span(w.get("offsetInTicks"), w.get("durationInTicks"))
        return Word(
            word=text(w.get("word")) or "",
            start=start,
            end=end,
            confidence=num(w.get("confidence")),
            speaker=speaker,
        )

    return extract_words(items(dig(phrase, "nBest", 0, "words")), _word)


def _phrase_utterance(phrase: Mapping[str, Any]) -> Utterance:
    best = obj(dig(phrase, "nBest", 0))
    start, end = _ticks_span(phrase.get("offsetInTicks"), phrase.get("durationInTicks"))
    return Utterance(
        text=text(best.get("display")) or text(best.get("lexical")) or "",
        start=start,
        end=end,
        speaker=speaker_ref(phrase.get("speaker")),
        confidence=num(best.get("confidence")),
        words=_phrase_words(phrase),
    )


class AzureSTTMapper:
    """
    Batch transcription results.

    Expects `{"transcription": <transcription resource>, "transcriptionData":
    <contents of the transcription result file>}`; a bare transcription
    resource (still running, or failed) is accepted as well.
    """

    provider = "azure-stt"

    def map_transcript(self, raw: Mapping[str, Any]) -> UnifiedTranscriptResponse:
        if "transcription" in raw or "transcriptionData" in raw:
            transcription = obj(raw.get("transcription"))
            result = obj(raw.get("transcriptionData"))
        else:
            transcription, result = raw, {}

        self_url = text(transcription.get("self")) or ""
        transcript_id = self_url.rstrip("/").split("/")[-1] if self_url else ""

        status = normalize_status(
            transcription.get("status"),
            self.provider,
            default_status="completed" if result else "queued",
        )
        if status == "error":
            return fail(
                self.provider,
                create_error(
                    ErrorCode.TRANSCRIPTION_ERROR,
                    text(dig(transcription, "properties", "error", "message")),
                ),
                raw,
            )

        phrases = sorted(
            items(result.get("recognizedPhrases")),
            key=lambda p: num(p.get("offsetInTicks")) or 0.0,
        )
        utterances = [_phrase_utterance(p) for p in phrases] or None
        words: List[Word] = []
        for phrase in phrases:
            words.extend(_phrase_words(phrase) or [])

        combined = [
            text(p.get("display")) or text(p.get("lexical")) or ""
            for p in items(result.get("combinedRecognizedPhrases"))
        ]
        duration_ticks = num(result.get("durationInTicks"))
        if duration_ticks is None:
            duration_ticks = num(result.get("duration"))

        data = TranscriptData(
            id=transcript_id,
            status=status,
            text=" ".join(c for c in combined if c) if combined else None,
            confidence=num(dig(phrases, 0, "nBest", 0, "confidence")),
            language=text(transcription.get("locale")),
            duration=non_negative(duration_ticks * _TICK) if duration_ticks is not None else None,
            speakers=speakers_of(utterances, words),
            words=by_start(words),
            utterances=utterances,
            created_at=text(transcription.get("createdDateTime")),
            completed_at=text(transcription.get("lastActionDateTime")) if status == "completed" else None,
        )

        return ok(self.provider, data, raw)
