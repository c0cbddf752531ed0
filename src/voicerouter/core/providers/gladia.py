from __future__ import annotations

from typing import Any, List, Mapping, Optional

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
from voicerouter.core.status import normalize_status
from voicerouter.core_types import (
    GladiaExtended,
    Tracking,
    TranscriptData,
    UnifiedTranscriptResponse,
    Utterance,
    Word,
)


def _word(w: Mapping[str, Any], speaker: Optional[str] = None) -> Word:
    start, end = span(w.get("start"), w.get("end"))
    return Word(
        word=text(w.get("word")) or "",
        start=start,
        end=end,
        confidence=num(w.get("confidence")),
        speaker=speaker,
    )


def _utterance(u: Mapping[str, Any]) -> Utterance:
    start, end = span(u.get("start"), u.get("end"))
    return Utterance(
        text=text(u.get("text")) or "",
        start=start,
        end=end,
        speaker=speaker_ref(u.get("speaker")),
        confidence=num(u.get("confidence")),
        words=extract_words(items(u.get("words")), _word),
    )


class GladiaMapper:
    """Pre-recorded job results (GET /v2/pre-recorded/{id})."""

    provider = "gladia"

    def map_transcript(self, raw: Mapping[str, Any]) -> UnifiedTranscriptResponse:
        status = normalize_status(raw.get("status"), self.provider)
        if status == "error":
            error_code = raw.get("error_code")
            return fail(
                self.provider,
                create_error(
                    ErrorCode.TRANSCRIPTION_ERROR,
                    "Transcription failed",
                    status_code=error_code if isinstance(error_code, int) else None,
                ),
                raw,
            )

        result = obj(raw.get("result"))
        transcription = obj(result.get("transcription"))
        raw_utterances = items(transcription.get("utterances"))

        utterances = by_start([_utterance(u) for u in raw_utterances])

        words: List[Word] = []
        for u in raw_utterances:
            speaker = speaker_ref(u.get("speaker"))
            words.extend(_word(w, speaker) for w in items(u.get("words")))

        file_info = obj(raw.get("file"))
        data = TranscriptData(
            id=text(raw.get("id")) or "",
            status=status,
            text=text(transcription.get("full_transcript")),
            language=text(dig(transcription, "languages", 0)),
            duration=non_negative(num(file_info.get("audio_duration"))),
            speakers=speakers_of(utterances, words),
            words=by_start(words),
            utterances=utterances,
            summary=text(dig(result, "summarization", "results")),
            metadata={
                "source_audio_url": file_info.get("source"),
                "filename": file_info.get("filename"),
                "audio_duration": file_info.get("audio_duration"),
                "request_params": raw.get("request_params"),
            }
            if file_info or raw.get("request_params")
            else None,
            created_at=text(raw.get("created_at")),
            completed_at=text(raw.get("completed_at")),
        )

        extended = GladiaExtended(
            translation=first_non_empty(result.get("translation")),
            moderation=first_non_empty(result.get("moderation")),
            entities=first_non_empty(result.get("named_entity_recognition")),
            sentiment=first_non_empty(result.get("sentiment_analysis")),
            audio_to_llm=first_non_empty(result.get("audio_to_llm")),
            chapters=first_non_empty(result.get("chapterization")),
            speaker_reidentification=first_non_empty(result.get("speaker_reidentification")),
            structured_data=first_non_empty(result.get("structured_data_extraction")),
            custom_metadata=first_non_empty(obj(raw.get("custom_metadata"))),
        )
        request_id = text(raw.get("request_id"))

        return ok(
            self.provider,
            data,
            raw,
            extended=extended,
            tracking=Tracking(request_id=request_id) if request_id else None,
        )
