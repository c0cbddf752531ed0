from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class VoiceRouterApiError(Exception):
    """
    Typed API error carrying a stable machine-readable code.
    """

    code: str
    message: str
    status_code: int = 400
    details: Optional[Dict[str, Any]] = None


class InvalidPayloadError(VoiceRouterApiError):
    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(code="invalid_payload", message=message, status_code=400, details=details)


class UnknownProviderError(VoiceRouterApiError):
    def __init__(self, provider: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            code="unknown_provider",
            message=f"unsupported provider: {provider}",
            status_code=404,
            details=details or {"provider": provider},
        )


class WebhookRejectedError(VoiceRouterApiError):
    def __init__(
        self,
        message: str,
        *,
        unauthorized: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            code="invalid_signature" if unauthorized else "webhook_rejected",
            message=message,
            status_code=401 if unauthorized else 400,
            details=details,
        )
