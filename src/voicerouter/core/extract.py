from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, TypeVar, Union

from voicerouter.core_types import Speaker, Word

T = TypeVar("T")

SpeakerId = Union[str, int, None]


def extract_speakers_from_utterances(
    utterances: Optional[Sequence[T]],
    get_speaker_id: Callable[[T], SpeakerId],
    format_label: Optional[Callable[[str], str]] = None,
) -> Optional[List[Speaker]]:
    """
    Distinct speakers in first-seen order.

    Returns None (not []) when there is nothing to look at or no element
    carries a speaker id, so callers can tell "no speaker info" apart from
    "zero speakers".
    """
    if not utterances:
        return None

    # dict keeps insertion order: first-seen wins
    seen: Dict[str, None] = {}
    for utterance in utterances:
        speaker_id = get_speaker_id(utterance)
        if speaker_id is None:
            continue
        seen.setdefault(str(speaker_id), None)

    if not seen:
        return None

    label = format_label or (lambda sid: f"Speaker {sid}")
    return [Speaker(id=sid, label=label(sid)) for sid in seen]


def extract_words(
    words: Optional[Sequence[T]],
    mapper: Callable[[T], Word],
) -> Optional[List[Word]]:
    """Map provider words in order; a mapper failure fails the whole extraction."""
    if not words:
        return None
    return [mapper(w) for w in words]


__all__ = ["extract_speakers_from_utterances", "extract_words"]
