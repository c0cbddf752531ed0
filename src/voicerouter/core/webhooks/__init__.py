from voicerouter.core.webhooks.assemblyai import AssemblyAIWebhookHandler
from voicerouter.core.webhooks.azure import AzureWebhookHandler
from voicerouter.core.webhooks.base import WebhookHandler, WebhookVerificationOptions, hmac_sha256_hex_matches
from voicerouter.core.webhooks.deepgram import DeepgramWebhookHandler
from voicerouter.core.webhooks.gladia import GladiaWebhookHandler
from voicerouter.core.webhooks.meeting_baas import MeetingBaasWebhookHandler
from voicerouter.core.webhooks.router import WebhookRouter, create_webhook_router
from voicerouter.core.webhooks.speechmatics import SpeechmaticsWebhookHandler
from voicerouter.core.webhooks.vexa import VexaWebhookHandler

__all__ = [
    "WebhookHandler",
    "WebhookVerificationOptions",
    "hmac_sha256_hex_matches",
    "WebhookRouter",
    "create_webhook_router",
    "GladiaWebhookHandler",
    "AssemblyAIWebhookHandler",
    "DeepgramWebhookHandler",
    "AzureWebhookHandler",
    "SpeechmaticsWebhookHandler",
    "VexaWebhookHandler",
    "MeetingBaasWebhookHandler",
]
