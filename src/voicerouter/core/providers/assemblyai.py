from __future__ import annotations

from typing import Any, Mapping, Optional

from voicerouter.core.error_codes import ErrorCode
from voicerouter.core.errors import create_error
from voicerouter.core.extract import extract_words
from voicerouter.core.providers.base import (
    by_start,
    fail,
    first_non_empty,
    items,
    keep_label,
    non_negative,
    num,
    ok,
    span,
    speaker_ref,
    speakers_of,
    text,
)
from voicerouter.core.status import normalize_status
from voicerouter.core_types import (
    AssemblyAIExtended,
    TranscriptData,
    UnifiedTranscriptResponse,
    Utterance,
    Word,
)

_MS = 0.001


def _word(w: Mapping[str, Any]) -> Word:
    start, end = span(w.get("start"), w.get("end"), _MS)
    return Word(
        word=text(w.get("text")) or "",
        start=start,
        end=end,
        confidence=num(w.get("confidence")),
        speaker=speaker_ref(w.get("speaker")),
    )


def _utterance(u: Mapping[str, Any]) -> Utterance:
    start, end = span(u.get("start"), u.get("end"), _MS)
    return Utterance(
        text=text(u.get("text")) or "",
        start=start,
        end=end,
        speaker=speaker_ref(u.get("speaker")),
        confidence=num(u.get("confidence")),
        words=extract_words(items(u.get("words")), _word),
    )


class AssemblyAIMapper:
    """
    Transcript objects (GET /v2/transcript/{id}).

    AssemblyAI reports word and utterance times in milliseconds and labels
    speakers "A", "B", ... which are kept as labels.
    """

    provider = "assemblyai"

    def map_transcript(self, raw: Mapping[str, Any]) -> UnifiedTranscriptResponse:
        status = normalize_status(raw.get("status"), self.provider)
        if status == "error":
            return fail(
                self.provider,
                create_error(ErrorCode.TRANSCRIPTION_ERROR, text(raw.get("error")) or "Transcription failed"),
                raw,
            )

        words = by_start(extract_words(items(raw.get("words")), _word))
        utterances = by_start([_utterance(u) for u in items(raw.get("utterances"))])

        metadata = {
            k: v
            for k, v in (
                ("audio_url", raw.get("audio_url")),
                ("speech_model", raw.get("speech_model")),
                ("language_confidence", raw.get("language_confidence")),
            )
            if v is not None
        }

        data = TranscriptData(
            id=text(raw.get("id")) or "",
            status=status,
            text=text(raw.get("text")),
            confidence=num(raw.get("confidence")),
            language=text(raw.get("language_code")),
            duration=non_negative(num(raw.get("audio_duration"))),
            speakers=speakers_of(utterances, words, keep_label),
            words=words,
            utterances=utterances,
            summary=text(raw.get("summary")),
            metadata=metadata or None,
        )

        extended = AssemblyAIExtended(
            chapters=first_non_empty(raw.get("chapters")),
            entities=first_non_empty(raw.get("entities")),
            sentiment_analysis=first_non_empty(raw.get("sentiment_analysis_results")),
            content_safety=first_non_empty(raw.get("content_safety_labels")),
            iab_categories=first_non_empty(raw.get("iab_categories_result")),
            auto_highlights=first_non_empty(raw.get("auto_highlights_result")),
        )

        return ok(self.provider, data, raw, extended=extended)
