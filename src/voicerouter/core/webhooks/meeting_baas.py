from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from voicerouter.core.assemble import normalize_response
from voicerouter.core.providers.base import dig, obj, text
from voicerouter.core.status import normalize_status
from voicerouter.core.webhooks.base import QueryParams, WebhookHandler
from voicerouter.core_types import TranscriptionStatus, UnifiedWebhookEvent, WebhookEventType

EVENTS = ("complete", "failed", "bot.status_change")

_EVENT_TYPES: Dict[TranscriptionStatus, WebhookEventType] = {
    "queued": "transcription.created",
    "processing": "transcription.processing",
    "completed": "transcription.completed",
}


class MeetingBaasWebhookHandler(WebhookHandler):
    """
    Bot webhooks: {"event": "complete" | "failed" | "bot.status_change", "data": {...}}.

    `complete` carries the whole transcript (bot_id, transcript, speakers, mp4),
    which is rebuilt into the meeting-data shape the mapper reads.
    """

    provider = "meeting-baas"

    def matches(self, payload: Any, *, query_params: QueryParams = None, user_agent: Optional[str] = None) -> bool:
        if not isinstance(payload, Mapping):
            return False
        return payload.get("event") in EVENTS and isinstance(payload.get("data"), Mapping)

    def parse(self, payload: Any, *, query_params: QueryParams = None) -> UnifiedWebhookEvent:
        if not self.matches(payload):
            return self.invalid_event(payload, "Invalid Meeting BaaS webhook payload")

        event = payload["event"]
        data = payload["data"]
        bot_id = text(data.get("bot_id"))

        if event == "complete":
            meeting = {
                "bot_id": bot_id,
                "status": "complete",
                "bot_data": {"bot": {"id": bot_id}, "transcripts": data.get("transcript")},
                "mp4": data.get("mp4"),
                "speakers": data.get("speakers"),
            }
            result = normalize_response(self.provider, meeting)
            return self.event(
                payload,
                "transcription.completed",
                transcript_id=bot_id,
                status="completed",
                data=result.data,
            )

        if event == "failed":
            return self.failed_event(
                payload,
                text(data.get("error")) or text(dig(data, "error", "message")),
                transcript_id=bot_id,
            )

        status_code = text(dig(data, "status", "code"))
        timestamp = text(obj(data.get("status")).get("created_at"))
        status = normalize_status(status_code, self.provider, default_status="processing")
        if status == "error":
            return self.failed_event(payload, f"Bot status {status_code}", transcript_id=bot_id, timestamp=timestamp)
        return self.event(payload, _EVENT_TYPES[status], transcript_id=bot_id, status=status, timestamp=timestamp)
