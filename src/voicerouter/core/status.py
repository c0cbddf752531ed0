from __future__ import annotations

from typing import Dict, Optional

from voicerouter.core_types import TranscriptionStatus

# Keys are lowercase provider statuses. Declaration order matters: the
# substring pass in normalize_status returns the first key contained in the
# input.
STATUS_MAPPINGS: Dict[str, Dict[str, TranscriptionStatus]] = {
    "gladia": {
        "queued": "queued",
        "processing": "processing",
        "done": "completed",
        "error": "error",
    },
    "assemblyai": {
        "queued": "queued",
        "processing": "processing",
        "completed": "completed",
        "error": "error",
    },
    "deepgram": {
        "queued": "queued",
        "processing": "processing",
        "completed": "completed",
        "error": "error",
    },
    "azure": {
        "succeeded": "completed",
        "running": "processing",
        "notstarted": "queued",
        "failed": "error",
    },
    "speechmatics": {
        "running": "processing",
        "done": "completed",
        "rejected": "error",
        "expired": "error",
    },
    # meeting bots
    "vexa": {
        "requested": "queued",
        "joining": "queued",
        "awaiting_admission": "queued",
        "active": "processing",
        "stopping": "processing",
        "completed": "completed",
        "failed": "error",
    },
    "meeting-baas": {
        "joining_call": "queued",
        "in_waiting_room": "queued",
        "in_call_not_recording": "processing",
        "in_call_recording": "processing",
        "call_ended": "processing",
        "done": "completed",
        "complete": "completed",
        "error": "error",
        "failed": "error",
    },
}

# provider tag -> table key, where they differ
_TABLE_ALIASES: Dict[str, str] = {
    "azure-stt": "azure",
}


def status_table(provider: str) -> Dict[str, TranscriptionStatus]:
    key = _TABLE_ALIASES.get(provider, provider)
    return STATUS_MAPPINGS.get(key, {})


def normalize_status(
    provider_status: Optional[str],
    provider: str,
    default_status: TranscriptionStatus = "queued",
) -> TranscriptionStatus:
    """
    Map a provider status string to the unified status.

    Exact (case-insensitive) match first, then the first declared key that is
    a substring of the input (Azure reports "Succeeded", "NotStarted"), then
    `default_status`.
    """
    if not provider_status:
        return default_status

    mapping = status_table(provider)
    status_key = str(provider_status).lower()

    if status_key in mapping:
        return mapping[status_key]

    for key, value in mapping.items():
        if key in status_key:
            return value

    return default_status


__all__ = ["STATUS_MAPPINGS", "normalize_status", "status_table"]
