from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from voicerouter.core.error_codes import ErrorCode

TranscriptionStatus = Literal["queued", "processing", "completed", "error"]

ProviderName = Literal[
    "gladia",
    "deepgram",
    "assemblyai",
    "openai-whisper",
    "azure-stt",
    "speechmatics",
    "vexa",
    "meeting-baas",
]

WebhookEventType = Literal[
    "transcription.created",
    "transcription.processing",
    "transcription.completed",
    "transcription.failed",
    "live.session_started",
    "live.session_ended",
    "live.transcript",
]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Word(_Frozen):
    word: str
    start: float
    end: float
    confidence: Optional[float] = None
    speaker: Optional[str] = None


class Utterance(_Frozen):
    text: str
    start: float
    end: float
    speaker: Optional[str] = None
    confidence: Optional[float] = None
    words: Optional[List[Word]] = None


class Speaker(_Frozen):
    id: str
    label: Optional[str] = None
    confidence: Optional[float] = None


class TranscriptData(_Frozen):
    """
    Provider-independent transcript.

    Optional fields are None while the provider has not produced them;
    None means "not yet known", never zero or empty.
    """

    id: str
    status: TranscriptionStatus
    text: Optional[str] = None
    confidence: Optional[float] = None
    duration: Optional[float] = Field(None, ge=0)
    language: Optional[str] = None
    speakers: Optional[List[Speaker]] = None
    words: Optional[List[Word]] = None
    utterances: Optional[List[Utterance]] = None
    summary: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None


class Tracking(_Frozen):
    request_id: Optional[str] = None
    audio_hash: Optional[str] = None
    processing_time_ms: Optional[float] = None


class StandardError(_Frozen):
    code: ErrorCode
    message: str
    status_code: Optional[int] = None
    details: Optional[Any] = None


# -------------------------
# Provider side-channel data
# -------------------------
class GladiaExtended(_Frozen):
    provider: Literal["gladia"] = "gladia"
    translation: Optional[Any] = None
    moderation: Optional[Any] = None
    entities: Optional[Any] = None
    sentiment: Optional[Any] = None
    audio_to_llm: Optional[Any] = None
    chapters: Optional[Any] = None
    speaker_reidentification: Optional[Any] = None
    structured_data: Optional[Any] = None
    custom_metadata: Optional[Dict[str, Any]] = None


class AssemblyAIExtended(_Frozen):
    provider: Literal["assemblyai"] = "assemblyai"
    chapters: Optional[Any] = None
    entities: Optional[Any] = None
    sentiment_analysis: Optional[Any] = None
    content_safety: Optional[Any] = None
    iab_categories: Optional[Any] = None
    auto_highlights: Optional[Any] = None


class DeepgramExtended(_Frozen):
    provider: Literal["deepgram"] = "deepgram"
    sentiments: Optional[Any] = None
    intents: Optional[Any] = None
    topics: Optional[Any] = None
    summary: Optional[Any] = None


class SpeechmaticsExtended(_Frozen):
    provider: Literal["speechmatics"] = "speechmatics"
    sentiment_analysis: Optional[Any] = None
    topics: Optional[Any] = None
    chapters: Optional[Any] = None
    audio_events: Optional[Any] = None


class VexaExtended(_Frozen):
    provider: Literal["vexa"] = "vexa"
    platform: Optional[str] = None
    native_meeting_id: Optional[str] = None
    meeting_url: Optional[str] = None


class MeetingBaasExtended(_Frozen):
    provider: Literal["meeting-baas"] = "meeting-baas"
    bot_name: Optional[str] = None
    meeting_url: Optional[str] = None
    mp4: Optional[str] = None
    speakers: Optional[List[str]] = None


ExtendedData = Union[
    GladiaExtended,
    AssemblyAIExtended,
    DeepgramExtended,
    SpeechmaticsExtended,
    VexaExtended,
    MeetingBaasExtended,
]


class UnifiedTranscriptResponse(_Frozen):
    success: bool
    provider: ProviderName
    data: Optional[TranscriptData] = None
    extended: Optional[ExtendedData] = Field(None, discriminator="provider")
    tracking: Optional[Tracking] = None
    error: Optional[StandardError] = None
    # verbatim provider payload, kept on failures too
    raw: Optional[Any] = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "UnifiedTranscriptResponse":
        if self.success and self.error is not None:
            raise ValueError("successful response must not carry an error")
        if not self.success:
            if self.error is None:
                raise ValueError("failed response requires an error")
            if self.data is not None:
                raise ValueError("failed response must not carry data")
        if self.extended is not None and self.extended.provider != self.provider:
            raise ValueError("extended data belongs to a different provider")
        return self


class UnifiedWebhookEvent(_Frozen):
    success: bool
    provider: ProviderName
    event_type: WebhookEventType
    raw: Any = None
    data: Optional[TranscriptData] = None
    transcript_id: Optional[str] = None
    status: Optional[TranscriptionStatus] = None
    error: Optional[StandardError] = None
    timestamp: Optional[str] = None


class WebhookValidation(_Frozen):
    valid: bool
    provider: Optional[ProviderName] = None
    error: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class WebhookRouterResult(_Frozen):
    success: bool
    provider: Optional[ProviderName] = None
    event: Optional[UnifiedWebhookEvent] = None
    error: Optional[str] = None
    verified: Optional[bool] = None


__all__ = [
    "TranscriptionStatus",
    "ProviderName",
    "WebhookEventType",
    "Word",
    "Utterance",
    "Speaker",
    "TranscriptData",
    "Tracking",
    "StandardError",
    "GladiaExtended",
    "AssemblyAIExtended",
    "DeepgramExtended",
    "SpeechmaticsExtended",
    "VexaExtended",
    "MeetingBaasExtended",
    "ExtendedData",
    "UnifiedTranscriptResponse",
    "UnifiedWebhookEvent",
    "WebhookValidation",
    "WebhookRouterResult",
]
