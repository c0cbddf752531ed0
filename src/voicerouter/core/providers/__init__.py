from __future__ import annotations

from voicerouter.core.providers.base import ProviderMapper
from voicerouter.core.providers.registry import get_mapper, is_supported, list_providers

__all__ = [
    "ProviderMapper",
    "get_mapper",
    "is_supported",
    "list_providers",
]
