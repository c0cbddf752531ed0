from __future__ import annotations

from typing import Dict, List

from voicerouter.core.providers.assemblyai import AssemblyAIMapper
from voicerouter.core.providers.azure import AzureSTTMapper
from voicerouter.core.providers.base import ProviderMapper
from voicerouter.core.providers.deepgram import DeepgramMapper
from voicerouter.core.providers.gladia import GladiaMapper
from voicerouter.core.providers.meeting_baas import MeetingBaasMapper
from voicerouter.core.providers.openai_whisper import OpenAIWhisperMapper
from voicerouter.core.providers.speechmatics import SpeechmaticsMapper
from voicerouter.core.providers.vexa import VexaMapper

# Closed set: adding a provider means adding one mapper module and one entry here.
_MAPPERS: Dict[str, ProviderMapper] = {
    "gladia": GladiaMapper(),
    "deepgram": DeepgramMapper(),
    "assemblyai": AssemblyAIMapper(),
    "openai-whisper": OpenAIWhisperMapper(),
    "azure-stt": AzureSTTMapper(),
    "speechmatics": SpeechmaticsMapper(),
    "vexa": VexaMapper(),
    "meeting-baas": MeetingBaasMapper(),
}


def get_mapper(provider: str) -> ProviderMapper:
    """Mapper for a provider tag; KeyError for tags outside the supported set."""
    try:
        return _MAPPERS[provider]
    except KeyError:
        raise KeyError(f"unsupported provider: {provider!r}") from None


def list_providers() -> List[str]:
    return list(_MAPPERS)


def is_supported(provider: str) -> bool:
    return provider in _MAPPERS
