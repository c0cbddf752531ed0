from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from voicerouter.core.providers.base import dig
from voicerouter.core.status import normalize_status
from voicerouter.core.webhooks.base import (
    QueryParams,
    WebhookHandler,
    WebhookVerificationOptions,
    hmac_sha256_hex_matches,
)
from voicerouter.core_types import UnifiedWebhookEvent

_TRANSCRIPTION_ID = re.compile(r"/transcriptions/([^/?]+)")

_EVENT_TYPES = {
    "queued": "transcription.created",
    "processing": "transcription.processing",
    "completed": "transcription.completed",
}


class AzureWebhookHandler(WebhookHandler):
    """Web hook notifications: {"action": "TranscriptionSucceeded", "timestamp": ..., "self": ".../transcriptions/<id>"}."""

    provider = "azure-stt"

    def matches(self, payload: Any, *, query_params: QueryParams = None, user_agent: Optional[str] = None) -> bool:
        if not isinstance(payload, Mapping) or "timestamp" not in payload:
            return False
        action = payload.get("action")
        return isinstance(action, str) and action.startswith("Transcription")

    def parse(self, payload: Any, *, query_params: QueryParams = None) -> UnifiedWebhookEvent:
        if not self.matches(payload):
            return self.invalid_event(payload, "Invalid Azure webhook payload")

        action = payload["action"]
        timestamp = payload.get("timestamp") if isinstance(payload.get("timestamp"), str) else None
        self_url = payload.get("self")
        match = _TRANSCRIPTION_ID.search(self_url) if isinstance(self_url, str) else None
        transcription_id = match.group(1) if match else None

        # "TranscriptionCreated" is not in the status table; everything else is
        suffix = action[len("Transcription"):]
        status = "queued" if suffix == "Created" else normalize_status(suffix, self.provider, default_status="error")

        if status == "error":
            if suffix != "Failed":
                return self.invalid_event(payload, f"Unknown Azure webhook action: {action}")
            message = dig(payload, "error", "message")
            return self.failed_event(
                payload,
                message if isinstance(message, str) else None,
                transcript_id=transcription_id,
                details={"error_code": dig(payload, "error", "code")},
                timestamp=timestamp,
            )

        return self.event(
            payload,
            _EVENT_TYPES[status],
            transcript_id=transcription_id,
            status=status,
            timestamp=timestamp,
        )

    def verify(self, payload: Any, options: WebhookVerificationOptions) -> bool:
        # signing is optional for Azure web hooks: unsigned deliveries pass
        if not options.signature:
            return True
        return hmac_sha256_hex_matches(payload, options)
