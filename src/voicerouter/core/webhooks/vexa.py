from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from voicerouter.core.assemble import normalize_response
from voicerouter.core.providers.base import text
from voicerouter.core.status import normalize_status
from voicerouter.core.webhooks.base import QueryParams, WebhookHandler
from voicerouter.core_types import TranscriptionStatus, UnifiedWebhookEvent, WebhookEventType

_EVENT_TYPES: Dict[TranscriptionStatus, WebhookEventType] = {
    "queued": "transcription.created",
    "processing": "transcription.processing",
    "completed": "transcription.completed",
}


class VexaWebhookHandler(WebhookHandler):
    """Meeting status pushes carry the meeting object; completed meetings may embed segments."""

    provider = "vexa"

    def matches(self, payload: Any, *, query_params: QueryParams = None, user_agent: Optional[str] = None) -> bool:
        if not isinstance(payload, Mapping):
            return False
        return isinstance(payload.get("platform"), str) and text(payload.get("native_meeting_id")) is not None

    def parse(self, payload: Any, *, query_params: QueryParams = None) -> UnifiedWebhookEvent:
        if not self.matches(payload):
            return self.invalid_event(payload, "Invalid Vexa webhook payload")

        meeting_id = text(payload.get("id")) or text(payload.get("native_meeting_id"))
        timestamp = text(payload.get("updated_at"))
        status = normalize_status(
            text(payload.get("status")),
            self.provider,
            default_status="completed" if payload.get("segments") else "queued",
        )

        if status == "error":
            return self.failed_event(
                payload,
                text(payload.get("error")),
                transcript_id=meeting_id,
                timestamp=timestamp,
            )

        data = None
        if payload.get("segments"):
            result = normalize_response(self.provider, payload)
            data = result.data
        return self.event(
            payload,
            _EVENT_TYPES[status],
            transcript_id=meeting_id,
            status=status,
            data=data,
            timestamp=timestamp,
        )
