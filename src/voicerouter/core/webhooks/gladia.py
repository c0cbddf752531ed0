from __future__ import annotations

from typing import Any, Mapping, Optional

from voicerouter.core.assemble import normalize_response
from voicerouter.core.webhooks.base import QueryParams, WebhookHandler
from voicerouter.core_types import UnifiedWebhookEvent


class GladiaWebhookHandler(WebhookHandler):
    """
    Two shapes:
      - webhook:  {"event": "transcription.success", "payload": {"id": ...}}
      - callback: {"id": ..., "event": "transcription.success", "payload": {"transcription": ..., ...}}
    Only callbacks embed the result; webhooks carry the job id alone.
    """

    provider = "gladia"

    def matches(self, payload: Any, *, query_params: QueryParams = None, user_agent: Optional[str] = None) -> bool:
        if not isinstance(payload, Mapping):
            return False
        event = payload.get("event")
        if not isinstance(event, str) or not event.startswith("transcription."):
            return False
        body = payload.get("payload")
        if not isinstance(body, Mapping):
            return False
        return isinstance(body.get("id"), str) or isinstance(payload.get("id"), str)

    def parse(self, payload: Any, *, query_params: QueryParams = None) -> UnifiedWebhookEvent:
        if not self.matches(payload):
            return self.invalid_event(payload, "Invalid Gladia webhook payload")

        body = payload["payload"]
        job_id = body.get("id") if isinstance(body.get("id"), str) else payload.get("id")
        event = payload["event"]

        if event == "transcription.created":
            return self.event(payload, "transcription.created", transcript_id=job_id, status="queued")

        if event == "transcription.success":
            data = None
            if "transcription" in body:
                result = normalize_response(
                    self.provider,
                    {"id": job_id, "status": "done", "result": dict(body)},
                )
                data = result.data
            return self.event(payload, "transcription.completed", transcript_id=job_id, status="completed", data=data)

        if event == "transcription.error":
            message = body.get("error") if isinstance(body.get("error"), str) else None
            return self.failed_event(payload, message, transcript_id=job_id)

        return self.invalid_event(payload, f"Unknown Gladia webhook event: {event}")
