from __future__ import annotations

from typing import Any, Mapping, Optional

from voicerouter.core.assemble import normalize_response
from voicerouter.core.error_codes import ErrorCode
from voicerouter.core.providers.base import text
from voicerouter.core.webhooks.base import QueryParams, WebhookHandler
from voicerouter.core_types import UnifiedWebhookEvent


class DeepgramWebhookHandler(WebhookHandler):
    """Callbacks post the full listen response, so the event always embeds the transcript."""

    provider = "deepgram"

    def matches(self, payload: Any, *, query_params: QueryParams = None, user_agent: Optional[str] = None) -> bool:
        if not isinstance(payload, Mapping):
            return False
        metadata = payload.get("metadata")
        results = payload.get("results")
        return (
            isinstance(metadata, Mapping)
            and "request_id" in metadata
            and isinstance(results, Mapping)
            and "channels" in results
        )

    def parse(self, payload: Any, *, query_params: QueryParams = None) -> UnifiedWebhookEvent:
        if not self.matches(payload):
            return self.invalid_event(payload, "Invalid Deepgram webhook payload")

        request_id = text(payload["metadata"].get("request_id"))
        result = normalize_response(self.provider, payload)
        if not result.success or result.data is None:
            return UnifiedWebhookEvent(
                success=False,
                provider=self.provider,
                event_type="transcription.failed",
                raw=payload,
                transcript_id=request_id,
                status="error",
                error=result.error,
            )
        if not result.data.text:
            return self.failed_event(payload, "Empty transcript", code=ErrorCode.NO_RESULTS, transcript_id=request_id)

        return self.event(payload, "transcription.completed", data=result.data, timestamp=result.data.created_at)
