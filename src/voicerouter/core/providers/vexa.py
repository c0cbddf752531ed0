from __future__ import annotations

from typing import Any, Mapping

from voicerouter.core.error_codes import ErrorCode
from voicerouter.core.errors import create_error
from voicerouter.core.providers.base import (
    fail,
    first_non_empty,
    items,
    keep_label,
    num,
    ok,
    span,
    speaker_ref,
    speakers_of,
    text,
)
from voicerouter.core.status import normalize_status
from voicerouter.core_types import TranscriptData, UnifiedTranscriptResponse, Utterance, VexaExtended


def _segment(seg: Mapping[str, Any]) -> Utterance:
    start, end = span(seg.get("start"), seg.get("end"))
    return Utterance(
        text=(text(seg.get("text")) or "").strip(),
        start=start,
        end=end,
        speaker=speaker_ref(seg.get("speaker")),
    )


class VexaMapper:
    """Meeting transcripts (GET /transcripts/{platform}/{native_meeting_id}); speakers are participant names."""

    provider = "vexa"

    def map_transcript(self, raw: Mapping[str, Any]) -> UnifiedTranscriptResponse:
        segments = sorted(items(raw.get("segments")), key=lambda s: num(s.get("start")) or 0.0)

        status = normalize_status(
            text(raw.get("status")),
            self.provider,
            default_status="completed" if segments else "queued",
        )
        if status == "error":
            return fail(
                self.provider,
                create_error(ErrorCode.TRANSCRIPTION_ERROR, text(raw.get("error"))),
                raw,
            )

        utterances = [_segment(s) for s in segments] or None
        data = TranscriptData(
            id=text(raw.get("id")) or text(raw.get("native_meeting_id")) or "",
            status=status,
            text=" ".join(u.text for u in utterances if u.text) if utterances else None,
            language=first_non_empty(*(text(s.get("language")) for s in segments)),
            speakers=speakers_of(utterances, None, keep_label),
            utterances=utterances,
            created_at=text(raw.get("start_time")),
            completed_at=text(raw.get("end_time")),
        )
        extended = VexaExtended(
            platform=text(raw.get("platform")),
            native_meeting_id=text(raw.get("native_meeting_id")),
            meeting_url=text(raw.get("constructed_meeting_url")),
        )
        return ok(self.provider, data, raw, extended=extended)
