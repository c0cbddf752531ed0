from __future__ import annotations

from typing import Any, Mapping, Optional

from voicerouter.core.assemble import normalize_response
from voicerouter.core.webhooks.base import QueryParams, WebhookHandler
from voicerouter.core_types import UnifiedWebhookEvent, WebhookValidation

USER_AGENT_MARKER = "Speechmatics-API"
NOTIFICATION_STATUSES = ("success", "error", "fetch_error", "trim_error")


class SpeechmaticsWebhookHandler(WebhookHandler):
    """
    Job notifications: POST to the configured URL with `?id=<job>&status=<status>`,
    user agent "Speechmatics-API/2.0", and (when configured) the json-v2
    transcript as body. The job id and outcome live in the query string.
    """

    provider = "speechmatics"

    def matches(self, payload: Any, *, query_params: QueryParams = None, user_agent: Optional[str] = None) -> bool:
        if user_agent and USER_AGENT_MARKER not in user_agent:
            return False
        if query_params is not None and not (query_params.get("id") and query_params.get("status")):
            return False
        if isinstance(payload, Mapping) and ("job" in payload or "id" in payload):
            return True
        return bool(query_params and query_params.get("id") and query_params.get("status"))

    def validate(
        self,
        payload: Any,
        *,
        query_params: QueryParams = None,
        user_agent: Optional[str] = None,
    ) -> WebhookValidation:
        params = query_params or {}
        if not params.get("id"):
            return WebhookValidation(valid=False, error="Missing required query parameter: id")
        if not params.get("status"):
            return WebhookValidation(valid=False, error="Missing required query parameter: status")
        if params["status"] not in NOTIFICATION_STATUSES:
            return WebhookValidation(valid=False, error=f"Invalid status value: {params['status']}")
        if user_agent and USER_AGENT_MARKER not in user_agent:
            return WebhookValidation(valid=False, error="Invalid user agent (expected Speechmatics-API/2.0)")
        return super().validate(payload, query_params=query_params, user_agent=user_agent)

    def parse(self, payload: Any, *, query_params: QueryParams = None) -> UnifiedWebhookEvent:
        params = query_params or {}
        job_id = params.get("id")
        status = params.get("status")

        if status in ("error", "fetch_error", "trim_error"):
            return self.failed_event(
                payload,
                f"Speechmatics job finished with status {status}",
                transcript_id=job_id,
                details={"notification_status": status},
            )
        if status != "success":
            return self.invalid_event(payload, f"Invalid status value: {status}")

        if isinstance(payload, Mapping) and "results" in payload and "job" in payload:
            result = normalize_response(self.provider, payload)
            if not result.success or result.data is None:
                return UnifiedWebhookEvent(
                    success=False,
                    provider=self.provider,
                    event_type="transcription.failed",
                    raw=payload,
                    transcript_id=job_id,
                    status="error",
                    error=result.error,
                )
            # the query id names the job even when the body omits it
            data = result.data if result.data.id else result.data.model_copy(update={"id": job_id})
            return self.event(payload, "transcription.completed", transcript_id=job_id, data=data)

        return self.event(payload, "transcription.completed", transcript_id=job_id, status="completed")
