from __future__ import annotations

import hashlib
import hmac
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from voicerouter.core.error_codes import ErrorCode
from voicerouter.core.errors import create_error
from voicerouter.core_types import (
    ProviderName,
    TranscriptData,
    TranscriptionStatus,
    UnifiedWebhookEvent,
    WebhookEventType,
    WebhookValidation,
)

QueryParams = Optional[Mapping[str, str]]


@dataclass(frozen=True)
class WebhookVerificationOptions:
    """
    Inputs for signature checks.

    raw_body should be the exact bytes received; re-serializing a parsed
    payload is only a fallback and may not reproduce the signed bytes.
    """

    signature: Optional[str] = None
    secret: Optional[str] = None
    raw_body: Optional[Union[str, bytes]] = None


def hmac_sha256_hex_matches(payload: Any, options: WebhookVerificationOptions) -> bool:
    if not options.signature or not options.secret:
        return False
    body = options.raw_body
    if body is None:
        try:
            body = payload if isinstance(payload, str) else json.dumps(payload, separators=(",", ":"))
        except (TypeError, ValueError):
            return False
    body_bytes = body.encode("utf-8") if isinstance(body, str) else body
    computed = hmac.new(options.secret.encode("utf-8"), body_bytes, hashlib.sha256).hexdigest()
    # compare as bytes: str operands must be ASCII
    return hmac.compare_digest(options.signature.strip().lower().encode("utf-8"), computed.encode("ascii"))


class WebhookHandler(ABC):
    """One implementation per provider that pushes webhooks."""

    provider: ProviderName

    @abstractmethod
    def matches(self, payload: Any, *, query_params: QueryParams = None, user_agent: Optional[str] = None) -> bool:
        """Cheap structural check used for provider detection."""

    @abstractmethod
    def parse(self, payload: Any, *, query_params: QueryParams = None) -> UnifiedWebhookEvent:
        """Normalize the payload. Must not raise for payloads that fail `matches`."""

    def verify(self, payload: Any, options: WebhookVerificationOptions) -> bool:
        # providers without signing accept everything
        return True

    def validate(
        self,
        payload: Any,
        *,
        query_params: QueryParams = None,
        user_agent: Optional[str] = None,
    ) -> WebhookValidation:
        if not self.matches(payload, query_params=query_params, user_agent=user_agent):
            return WebhookValidation(valid=False, error=f"Payload does not match {self.provider} webhook format")
        try:
            event = self.parse(payload, query_params=query_params)
        except Exception as e:
            return WebhookValidation(
                valid=False,
                error=str(e) or e.__class__.__name__,
                details={"exception_class": e.__class__.__name__},
            )
        return WebhookValidation(
            valid=True,
            provider=self.provider,
            details={"event_type": event.event_type, "success": event.success},
        )

    # -------------------------
    # Event builders
    # -------------------------
    def event(
        self,
        payload: Any,
        event_type: WebhookEventType,
        *,
        transcript_id: Optional[str] = None,
        status: Optional[TranscriptionStatus] = None,
        data: Optional[TranscriptData] = None,
        timestamp: Optional[str] = None,
    ) -> UnifiedWebhookEvent:
        return UnifiedWebhookEvent(
            success=True,
            provider=self.provider,
            event_type=event_type,
            raw=payload,
            data=data,
            transcript_id=transcript_id if transcript_id is not None else (data.id if data else None),
            status=status if status is not None else (data.status if data else None),
            timestamp=timestamp,
        )

    def failed_event(
        self,
        payload: Any,
        message: Optional[str] = None,
        *,
        code: ErrorCode = ErrorCode.TRANSCRIPTION_ERROR,
        transcript_id: Optional[str] = None,
        details: Any = None,
        timestamp: Optional[str] = None,
    ) -> UnifiedWebhookEvent:
        return UnifiedWebhookEvent(
            success=False,
            provider=self.provider,
            event_type="transcription.failed",
            raw=payload,
            transcript_id=transcript_id,
            status="error",
            error=create_error(code, message, details),
            timestamp=timestamp,
        )

    def invalid_event(self, payload: Any, message: str) -> UnifiedWebhookEvent:
        return self.failed_event(payload, message, code=ErrorCode.PARSE_ERROR)
