from __future__ import annotations

from typing import Any, Dict, List, Optional

from voicerouter.core.webhooks.assemblyai import AssemblyAIWebhookHandler
from voicerouter.core.webhooks.azure import AzureWebhookHandler
from voicerouter.core.webhooks.base import QueryParams, WebhookHandler, WebhookVerificationOptions
from voicerouter.core.webhooks.deepgram import DeepgramWebhookHandler
from voicerouter.core.webhooks.gladia import GladiaWebhookHandler
from voicerouter.core.webhooks.meeting_baas import MeetingBaasWebhookHandler
from voicerouter.core.webhooks.speechmatics import SpeechmaticsWebhookHandler
from voicerouter.core.webhooks.vexa import VexaWebhookHandler
from voicerouter.core_types import WebhookRouterResult, WebhookValidation
from voicerouter.utils.logger import get_logger

logger = get_logger("voicerouter.webhooks")

DETECTION_FAILED = "Could not detect webhook provider from payload structure"
SIGNATURE_FAILED = "Webhook signature verification failed"


class WebhookRouter:
    """
    Detects the sending provider and dispatches to its handler.

    Handlers are tried in insertion order; the most specific shapes come
    first and speechmatics (which accepts any object with "id" or "job")
    comes last.
    """

    def __init__(self) -> None:
        handlers: List[WebhookHandler] = [
            GladiaWebhookHandler(),
            MeetingBaasWebhookHandler(),
            AssemblyAIWebhookHandler(),
            DeepgramWebhookHandler(),
            AzureWebhookHandler(),
            VexaWebhookHandler(),
            SpeechmaticsWebhookHandler(),
        ]
        self._handlers: Dict[str, WebhookHandler] = {h.provider: h for h in handlers}

    def providers(self) -> List[str]:
        return list(self._handlers.keys())

    def get_handler(self, provider: str) -> Optional[WebhookHandler]:
        return self._handlers.get(provider)

    def detect_provider(
        self,
        payload: Any,
        *,
        query_params: QueryParams = None,
        user_agent: Optional[str] = None,
    ) -> Optional[str]:
        for provider, handler in self._handlers.items():
            if handler.matches(payload, query_params=query_params, user_agent=user_agent):
                return provider
        return None

    def validate(
        self,
        payload: Any,
        *,
        provider: Optional[str] = None,
        query_params: QueryParams = None,
        user_agent: Optional[str] = None,
    ) -> WebhookValidation:
        if provider is None:
            provider = self.detect_provider(payload, query_params=query_params, user_agent=user_agent)
            if provider is None:
                return WebhookValidation(valid=False, error=DETECTION_FAILED)

        handler = self.get_handler(provider)
        if handler is None:
            return WebhookValidation(valid=False, error=f"Unknown provider: {provider}")
        return handler.validate(payload, query_params=query_params, user_agent=user_agent)

    def verify(self, payload: Any, provider: str, options: WebhookVerificationOptions) -> bool:
        handler = self.get_handler(provider)
        if handler is None:
            return True
        return handler.verify(payload, options)

    def route(
        self,
        payload: Any,
        *,
        provider: Optional[str] = None,
        verification: Optional[WebhookVerificationOptions] = None,
        verify_signature: bool = True,
        query_params: QueryParams = None,
        user_agent: Optional[str] = None,
    ) -> WebhookRouterResult:
        """
        Verify (when options are given), validate, then parse.

        Never raises: every failure is reported on the result.
        """
        if provider is None:
            provider = self.detect_provider(payload, query_params=query_params, user_agent=user_agent)
            if provider is None:
                logger.info("WEBHOOK_UNDETECTED payload_type=%s", type(payload).__name__)
                return WebhookRouterResult(success=False, error=DETECTION_FAILED)

        handler = self.get_handler(provider)
        if handler is None:
            return WebhookRouterResult(success=False, error=f"Handler not found for provider: {provider}")

        verified = True
        if verify_signature and verification is not None:
            try:
                verified = handler.verify(payload, verification)
            except Exception as e:
                logger.warning("WEBHOOK_VERIFY_FAILED provider=%s err=%s", provider, e, exc_info=True)
                verified = False
            if not verified:
                logger.warning("WEBHOOK_SIGNATURE_MISMATCH provider=%s", provider)
                return WebhookRouterResult(success=False, provider=provider, error=SIGNATURE_FAILED, verified=False)

        validation = handler.validate(payload, query_params=query_params, user_agent=user_agent)
        if not validation.valid:
            logger.info("WEBHOOK_INVALID provider=%s err=%s", provider, validation.error)
            return WebhookRouterResult(success=False, provider=provider, error=validation.error, verified=verified)

        try:
            event = handler.parse(payload, query_params=query_params)
        except Exception as e:
            logger.warning("WEBHOOK_PARSE_FAILED provider=%s err=%s", provider, e, exc_info=True)
            return WebhookRouterResult(
                success=False,
                provider=provider,
                error=f"Failed to parse webhook: {e}",
                verified=verified,
            )

        logger.debug("WEBHOOK provider=%s event=%s success=%s", provider, event.event_type, event.success)
        return WebhookRouterResult(success=True, provider=provider, event=event, verified=verified)


def create_webhook_router() -> WebhookRouter:
    return WebhookRouter()


__all__ = ["WebhookRouter", "create_webhook_router", "DETECTION_FAILED", "SIGNATURE_FAILED"]
