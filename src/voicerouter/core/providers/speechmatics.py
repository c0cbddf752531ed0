from __future__ import annotations

from typing import Any, List, Mapping, Optional

from voicerouter.core.error_codes import ErrorCode
from voicerouter.core.errors import create_error
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
    SpeechmaticsExtended,
    Tracking,
    TranscriptData,
    UnifiedTranscriptResponse,
    Utterance,
    Word,
)


def _join(tokens: List[Mapping[str, Any]]) -> str:
    """Words space-separated, punctuation glued to the preceding word."""
    out = ""
    for tok in tokens:
        content = text(dig(tok, "alternatives", 0, "content")) or ""
        if not content:
            continue
        if tok.get("type") == "punctuation" or not out:
            out += content
        else:
            out += " " + content
    return out


def _word(tok: Mapping[str, Any]) -> Word:
    alt = obj(dig(tok, "alternatives", 0))
    start, end = span(tok.get("start_time"), tok.get("end_time"))
    return Word(
        word=text(alt.get("content")) or "",
        start=start,
        end=end,
        confidence=num(alt.get("confidence")),
        speaker=speaker_ref(alt.get("speaker")),
    )


def _speaker_runs(tokens: List[Mapping[str, Any]]) -> Optional[List[Utterance]]:
    """Group consecutive tokens of the same speaker into utterances."""
    runs: List[List[Mapping[str, Any]]] = []
    current: Optional[str] = None
    for tok in tokens:
        speaker = speaker_ref(dig(tok, "alternatives", 0, "speaker"))
        if tok.get("type") == "punctuation" and runs:
            runs[-1].append(tok)
            continue
        if speaker is None:
            continue
        if not runs or speaker != current:
            runs.append([])
            current = speaker
        runs[-1].append(tok)

    utterances: List[Utterance] = []
    for run in runs:
        words = [_word(t) for t in run if t.get("type") == "word"]
        if not words:
            continue
        utterances.append(
            Utterance(
                text=_join(run),
                start=words[0].start,
                end=max(words[-1].end, words[0].start),
                speaker=words[0].speaker,
                words=words,
            )
        )
    return utterances or None


class SpeechmaticsMapper:
    """
    Batch jobs: either a job-details payload (`{"job": {...}}` without
    results, still running or rejected) or a `json-v2` transcript.
    """

    provider = "speechmatics"

    def map_transcript(self, raw: Mapping[str, Any]) -> UnifiedTranscriptResponse:
        job = obj(raw.get("job"))
        tokens = items(raw.get("results"))
        has_transcript = "results" in raw

        status = normalize_status(
            job.get("status"),
            self.provider,
            default_status="completed" if has_transcript else "queued",
        )
        if status == "error":
            return fail(
                self.provider,
                create_error(
                    ErrorCode.TRANSCRIPTION_ERROR,
                    text(dig(job, "errors", 0, "message")),
                ),
                raw,
            )

        word_tokens = [
            t for t in tokens if t.get("type") == "word" and "start_time" in t and "end_time" in t
        ]
        words = by_start([_word(t) for t in word_tokens])
        utterances = by_start(_speaker_runs(tokens))
        language = first_non_empty(
            text(dig(raw, "metadata", "transcription_config", "language")),
            text(dig(job, "config", "transcription_config", "language")),
        )

        job_id = text(job.get("id")) or ""
        data = TranscriptData(
            id=job_id,
            status=status,
            text=_join(tokens) if has_transcript else None,
            language=language,
            duration=non_negative(num(job.get("duration"))),
            speakers=speakers_of(utterances, words),
            words=words,
            utterances=utterances,
            summary=text(dig(raw, "summary", "content")),
            metadata={"data_name": job.get("data_name")} if job.get("data_name") else None,
            created_at=text(job.get("created_at")),
        )

        extended = SpeechmaticsExtended(
            sentiment_analysis=first_non_empty(raw.get("sentiment_analysis")),
            topics=first_non_empty(raw.get("topics")),
            chapters=first_non_empty(raw.get("chapters")),
            audio_events=first_non_empty(raw.get("audio_events")),
        )

        return ok(
            self.provider,
            data,
            raw,
            extended=extended,
            tracking=Tracking(request_id=job_id) if job_id else None,
        )
