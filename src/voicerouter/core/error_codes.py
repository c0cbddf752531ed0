from __future__ import annotations

from enum import Enum
from typing import Dict


class ErrorCode(str, Enum):
    """Closed error taxonomy shared by every provider."""

    PARSE_ERROR = "PARSE_ERROR"
    WEBSOCKET_ERROR = "WEBSOCKET_ERROR"
    POLLING_TIMEOUT = "POLLING_TIMEOUT"
    TRANSCRIPTION_ERROR = "TRANSCRIPTION_ERROR"
    CONNECTION_TIMEOUT = "CONNECTION_TIMEOUT"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_SUPPORTED = "NOT_SUPPORTED"
    NO_RESULTS = "NO_RESULTS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ERROR_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.PARSE_ERROR: "Failed to parse response data",
    ErrorCode.WEBSOCKET_ERROR: "WebSocket connection error",
    ErrorCode.POLLING_TIMEOUT: "Transcription did not complete within timeout period",
    ErrorCode.TRANSCRIPTION_ERROR: "Transcription processing failed",
    ErrorCode.CONNECTION_TIMEOUT: "Connection attempt timed out",
    ErrorCode.INVALID_INPUT: "Invalid input provided",
    ErrorCode.NOT_SUPPORTED: "Operation not supported by this provider",
    ErrorCode.NO_RESULTS: "No transcription results available",
    ErrorCode.UNKNOWN_ERROR: "An unknown error occurred",
}

_VALUES = frozenset(c.value for c in ErrorCode)


def is_error_code(value: object) -> bool:
    return isinstance(value, str) and value in _VALUES
