from __future__ import annotations

from typing import Any, List, Mapping

from voicerouter.core.error_codes import ErrorCode
from voicerouter.core.errors import create_error
from voicerouter.core.providers.base import (
    by_start,
    dig,
    fail,
    first_non_empty,
    items,
    keep_label,
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
    MeetingBaasExtended,
    TranscriptData,
    UnifiedTranscriptResponse,
    Utterance,
    Word,
)


def _entry(entry: Mapping[str, Any]) -> Utterance:
    speaker = speaker_ref(entry.get("speaker"))
    words = [
        Word(word=text(w.get("text")) or "", start=s, end=e, speaker=speaker)
        for w in items(entry.get("words"))
        for s, e in (span(w.get("start_time"), w.get("end_time")),)
    ]
    end_time = entry.get("end_time")
    if num(end_time) is None and words:
        end_time = words[-1].end
    start, end = span(entry.get("start_time"), end_time)
    return Utterance(
        text=" ".join(w.word for w in words if w.word),
        start=start,
        end=end,
        speaker=speaker,
        words=words or None,
    )


class MeetingBaasMapper:
    """
    Bot meeting data (GET /bots/meeting_data): `{"bot_data": {"bot": {...},
    "transcripts": [...]}, "mp4": ..., "duration": ...}`. Each transcript entry
    is one speaker turn with its words.
    """

    provider = "meeting-baas"

    def map_transcript(self, raw: Mapping[str, Any]) -> UnifiedTranscriptResponse:
        bot_data = obj(raw.get("bot_data"))
        bot = obj(bot_data.get("bot"))
        entries = sorted(
            items(bot_data.get("transcripts")),
            key=lambda t: num(t.get("start_time")) or 0.0,
        )

        raw_status = first_non_empty(
            text(dig(raw, "status", "code")),
            text(raw.get("status")),
            text(bot.get("status")),
        )
        status = normalize_status(
            raw_status,
            self.provider,
            default_status="completed" if entries else "queued",
        )
        if status == "error":
            return fail(
                self.provider,
                create_error(ErrorCode.TRANSCRIPTION_ERROR, text(raw.get("error")) or text(bot.get("errors"))),
                raw,
            )

        utterances = [_entry(e) for e in entries] or None
        words: List[Word] = []
        for u in utterances or []:
            words.extend(u.words or [])

        data = TranscriptData(
            id=first_non_empty(text(bot.get("uuid")), text(bot.get("id")), text(raw.get("bot_id"))) or "",
            status=status,
            text=" ".join(u.text for u in utterances if u.text) if utterances else None,
            duration=non_negative(num(raw.get("duration"))),
            speakers=speakers_of(utterances, words, keep_label),
            words=by_start(words),
            utterances=utterances,
            created_at=text(bot.get("created_at")),
            completed_at=text(bot.get("ended_at")),
        )
        listed = raw.get("speakers") or bot.get("speakers")
        speaker_names = [s for s in map(text, listed) if s] if isinstance(listed, list) else []
        extended = MeetingBaasExtended(
            bot_name=text(bot.get("bot_name")),
            meeting_url=text(bot.get("meeting_url")),
            mp4=text(raw.get("mp4")),
            speakers=speaker_names or None,
        )
        return ok(self.provider, data, raw, extended=extended)
