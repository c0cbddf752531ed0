from __future__ import annotations

import hashlib
import json
from typing import Any, Mapping

from voicerouter.core.extract import extract_words
from voicerouter.core.providers.base import (
    by_start,
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
from voicerouter.core_types import TranscriptData, UnifiedTranscriptResponse, Utterance, Word


def _content_id(raw: Mapping[str, Any]) -> str:
    # OpenAI returns no job id; derive a stable one so re-normalizing the
    # same payload yields the same id
    blob = json.dumps(raw, sort_keys=True, default=str, ensure_ascii=False)
    return "openai-" + hashlib.sha256(blob.encode("utf-8")).hexdigest()[:16]


def _word(w: Mapping[str, Any]) -> Word:
    start, end = span(w.get("start"), w.get("end"))
    return Word(word=text(w.get("word")) or "", start=start, end=end)


def _segment(seg: Mapping[str, Any]) -> Utterance:
    start, end = span(seg.get("start"), seg.get("end"))
    return Utterance(
        text=(text(seg.get("text")) or "").strip(),
        start=start,
        end=end,
        speaker=speaker_ref(seg.get("speaker")),
    )


class OpenAIWhisperMapper:
    """
    Audio transcription responses: `json` ({text}), `verbose_json` (language,
    duration, words, segments) and `diarized_json` (segments with speaker).
    The API is synchronous, so every result is completed.
    """

    provider = "openai-whisper"

    def map_transcript(self, raw: Mapping[str, Any]) -> UnifiedTranscriptResponse:
        utterances = by_start([_segment(s) for s in items(raw.get("segments"))])
        words = by_start(extract_words(items(raw.get("words")), _word))

        data = TranscriptData(
            id=text(raw.get("id")) or _content_id(raw),
            status="completed",
            text=text(raw.get("text")),
            language=text(raw.get("language")),
            duration=non_negative(num(raw.get("duration"))),
            # diarized output labels speakers itself ("A", "B" or known names)
            speakers=speakers_of(utterances, words, keep_label),
            words=words,
            utterances=utterances,
        )
        return ok(self.provider, data, raw)
