from __future__ import annotations

import math
from typing import Any, Callable, List, Mapping, Optional, Protocol, Sequence, Tuple, TypeVar, Union

from voicerouter.core.extract import extract_speakers_from_utterances
from voicerouter.core_types import (
    ExtendedData,
    ProviderName,
    Speaker,
    StandardError,
    Tracking,
    TranscriptData,
    UnifiedTranscriptResponse,
    Utterance,
    Word,
)


class ProviderMapper(Protocol):
    """
    One implementation per provider tag.

    map_transcript receives an already-deserialized payload (a mapping) and
    returns the unified envelope. Missing or malformed optional fields
    degrade to None; provider-reported failures become a failure envelope.
    """

    provider: ProviderName

    def map_transcript(self, raw: Mapping[str, Any]) -> UnifiedTranscriptResponse: ...


# -------------------------
# Envelope builders
# -------------------------
def ok(
    provider: ProviderName,
    data: TranscriptData,
    raw: Any,
    *,
    extended: Optional[ExtendedData] = None,
    tracking: Optional[Tracking] = None,
) -> UnifiedTranscriptResponse:
    return UnifiedTranscriptResponse(
        success=True,
        provider=provider,
        data=data,
        extended=extended,
        tracking=tracking,
        raw=raw,
    )


def fail(provider: ProviderName, error: StandardError, raw: Any = None) -> UnifiedTranscriptResponse:
    return UnifiedTranscriptResponse(success=False, provider=provider, error=error, raw=raw)


# -------------------------
# Tolerant payload access
# -------------------------
def obj(value: Any) -> Mapping[str, Any]:
    """The value if it is a mapping, else an empty one."""
    return value if isinstance(value, Mapping) else {}


def items(value: Any) -> List[Mapping[str, Any]]:
    """Mapping elements of a list-like value; anything else yields []."""
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, Mapping)]


def dig(value: Any, *path: Any) -> Any:
    """Walk nested mappings/lists; None as soon as a step is missing."""
    cur = value
    for step in path:
        if isinstance(step, int):
            if not isinstance(cur, (list, tuple)) or not -len(cur) <= step < len(cur):
                return None
            cur = cur[step]
        else:
            if not isinstance(cur, Mapping):
                return None
            cur = cur.get(step)
        if cur is None:
            return None
    return cur


def num(value: Any) -> Optional[float]:
    """Finite float, or None for anything else (nan, inf, huge ints, junk)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        out = float(value)
    except (ValueError, OverflowError):
        return None
    return out if math.isfinite(out) else None


def text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def speaker_ref(value: Any) -> Optional[str]:
    """Speaker ids are strings in the unified schema (0 -> "0")."""
    if value is None or isinstance(value, bool) or value == "":
        return None
    return str(value)


def non_negative(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return max(value, 0.0)


def span(start: Any, end: Any, scale: float = 1.0) -> Tuple[float, float]:
    """(start, end) in seconds with end clamped to >= start."""
    s = (num(start) or 0.0) * scale
    e = (num(end) or 0.0) * scale
    return s, max(e, s)


Timed = TypeVar("Timed", bound=Union[Word, Utterance])


def by_start(timed: Optional[Sequence[Timed]]) -> Optional[List[Timed]]:
    """Chronological copy (stable for equal starts); None when empty."""
    if not timed:
        return None
    return sorted(timed, key=lambda t: t.start)


def speakers_of(
    utterances: Optional[Sequence[Utterance]],
    words: Optional[Sequence[Word]],
    format_label: Optional[Callable[[str], str]] = None,
) -> Optional[List[Speaker]]:
    """
    Speakers referenced by the emitted utterances, then words.

    Deriving them from what was emitted keeps the speaker set equal to the
    set of speaker references.
    """
    refs: List[Any] = list(utterances or []) + list(words or [])
    return extract_speakers_from_utterances(refs, lambda x: x.speaker, format_label)


def keep_label(speaker_id: str) -> str:
    return speaker_id


def first_non_empty(*values: Any) -> Any:
    for v in values:
        if v not in (None, "", [], {}):
            return v
    return None
