from __future__ import annotations

from typing import Any, Mapping, Optional

from voicerouter.core.webhooks.base import (
    QueryParams,
    WebhookHandler,
    WebhookVerificationOptions,
    hmac_sha256_hex_matches,
)
from voicerouter.core_types import UnifiedWebhookEvent


class AssemblyAIWebhookHandler(WebhookHandler):
    """Transcript-ready notifications: {"transcript_id": ..., "status": "completed" | "error"}."""

    provider = "assemblyai"

    def matches(self, payload: Any, *, query_params: QueryParams = None, user_agent: Optional[str] = None) -> bool:
        if not isinstance(payload, Mapping):
            return False
        return isinstance(payload.get("transcript_id"), str) and payload.get("status") in ("completed", "error")

    def parse(self, payload: Any, *, query_params: QueryParams = None) -> UnifiedWebhookEvent:
        if not self.matches(payload):
            return self.invalid_event(payload, "Invalid AssemblyAI webhook payload")

        transcript_id = payload["transcript_id"]
        if payload["status"] == "completed":
            return self.event(payload, "transcription.completed", transcript_id=transcript_id, status="completed")
        return self.failed_event(payload, transcript_id=transcript_id)

    def verify(self, payload: Any, options: WebhookVerificationOptions) -> bool:
        return hmac_sha256_hex_matches(payload, options)
