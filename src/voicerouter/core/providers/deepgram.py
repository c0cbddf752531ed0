from __future__ import annotations

from typing import Any, Mapping

from voicerouter.core.error_codes import ErrorCode
from voicerouter.core.errors import create_error
from voicerouter.core.extract import extract_words
from voicerouter.core.providers.base import (
    by_start,
    dig,
    fail,
    first_non_empty,
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
from voicerouter.core_types import (
    DeepgramExtended,
    Tracking,
    TranscriptData,
    UnifiedTranscriptResponse,
    Utterance,
    Word,
)


def _word(w: Mapping[str, Any]) -> Word:
    start, end = span(w.get("start"), w.get("end"))
    return Word(
        word=text(w.get("punctuated_word")) or text(w.get("word")) or "",
        start=start,
        end=end,
        confidence=num(w.get("confidence")),
        speaker=speaker_ref(w.get("speaker")),
    )


def _utterance(u: Mapping[str, Any]) -> Utterance:
    start, end = span(u.get("start"), u.get("end"))
    return Utterance(
        text=text(u.get("transcript")) or "",
        start=start,
        end=end,
        speaker=speaker_ref(u.get("speaker")),
        confidence=num(u.get("confidence")),
        words=extract_words(items(u.get("words")), _word),
    )


class DeepgramMapper:
    """Pre-recorded listen responses; Deepgram answers synchronously, so results are final."""

    provider = "deepgram"

    def map_transcript(self, raw: Mapping[str, Any]) -> UnifiedTranscriptResponse:
        results = obj(raw.get("results"))
        metadata = obj(raw.get("metadata"))
        channel = obj(dig(results, "channels", 0))
        alternative = dig(channel, "alternatives", 0)

        if not isinstance(alternative, Mapping):
            return fail(
                self.provider,
                create_error(ErrorCode.NO_RESULTS, "No transcription results returned by Deepgram"),
                raw,
            )

        words = by_start(extract_words(items(alternative.get("words")), _word))
        utterances = by_start([_utterance(u) for u in items(results.get("utterances"))])
        summary = first_non_empty(
            text(dig(alternative, "summaries", 0, "summary")),
            text(dig(results, "summary", "short")),
        )

        info = {
            k: v
            for k, v in (
                ("model_info", metadata.get("model_info")),
                ("models", metadata.get("models")),
                ("channels", metadata.get("channels")),
                ("created", metadata.get("created")),
            )
            if v is not None
        }

        request_id = text(metadata.get("request_id"))
        data = TranscriptData(
            id=request_id or "",
            status="completed",
            text=text(alternative.get("transcript")),
            confidence=num(alternative.get("confidence")),
            language=text(channel.get("detected_language")),
            duration=non_negative(num(metadata.get("duration"))),
            speakers=speakers_of(utterances, words),
            words=words,
            utterances=utterances,
            summary=summary,
            metadata=info or None,
            created_at=text(metadata.get("created")),
        )

        extended = DeepgramExtended(
            sentiments=first_non_empty(results.get("sentiments")),
            intents=first_non_empty(results.get("intents")),
            topics=first_non_empty(results.get("topics")),
            summary=first_non_empty(results.get("summary")),
        )

        return ok(
            self.provider,
            data,
            raw,
            extended=extended,
            tracking=Tracking(request_id=request_id) if request_id else None,
        )
