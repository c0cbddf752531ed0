from voicerouter.core_types import (
    Speaker,
    StandardError,
    Tracking,
    TranscriptData,
    UnifiedTranscriptResponse,
    UnifiedWebhookEvent,
    Utterance,
    WebhookRouterResult,
    WebhookValidation,
    Word,
)
from voicerouter.core.assemble import normalize_exception, normalize_response
from voicerouter.core.error_codes import ERROR_MESSAGES, ErrorCode
from voicerouter.core.errors import TransportError, create_error, create_error_from_exception
from voicerouter.core.extract import extract_speakers_from_utterances, extract_words
from voicerouter.core.status import STATUS_MAPPINGS, normalize_status
from voicerouter.core.webhooks import WebhookRouter, WebhookVerificationOptions, create_webhook_router

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "normalize_response",
    "normalize_exception",
    "create_error",
    "create_error_from_exception",
    "TransportError",
    "ErrorCode",
    "ERROR_MESSAGES",
    "extract_speakers_from_utterances",
    "extract_words",
    "normalize_status",
    "STATUS_MAPPINGS",
    "WebhookRouter",
    "WebhookVerificationOptions",
    "create_webhook_router",
    "Word",
    "Utterance",
    "Speaker",
    "TranscriptData",
    "Tracking",
    "StandardError",
    "UnifiedTranscriptResponse",
    "UnifiedWebhookEvent",
    "WebhookValidation",
    "WebhookRouterResult",
]
