from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional


def _split_pairs(v: str) -> Dict[str, str]:
    """'gladia=abc, assemblyai=def' -> {"gladia": "abc", "assemblyai": "def"}"""
    out: Dict[str, str] = {}
    for part in (v or "").split(","):
        key, sep, value = part.strip().partition("=")
        if sep and key.strip() and value.strip():
            out[key.strip()] = value.strip()
    return out


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default) not in ("0", "false", "False")


@dataclass(frozen=True)
class ApiConfig:
    """
    API runtime config (env-driven).

    Values are read when the config is built, so tests can monkeypatch the
    environment and call load_config() again.
    """

    log_level: str = field(default_factory=lambda: os.getenv("VOICEROUTER_API_LOG_LEVEL", "INFO"))
    log_path: str = field(default_factory=lambda: os.getenv("VOICEROUTER_LOG_PATH", ""))

    # Signature checks run only for providers with a configured secret.
    # Example: VOICEROUTER_WEBHOOK_SECRETS="assemblyai=s3cret,azure-stt=other"
    verify_webhooks: bool = field(default_factory=lambda: _flag("VOICEROUTER_VERIFY_WEBHOOKS", "1"))
    webhook_secrets: Dict[str, str] = field(
        default_factory=lambda: _split_pairs(os.getenv("VOICEROUTER_WEBHOOK_SECRETS", ""))
    )
    signature_header: str = field(
        default_factory=lambda: os.getenv("VOICEROUTER_SIGNATURE_HEADER", "X-Webhook-Signature")
    )

    def secret_for(self, provider: Optional[str]) -> Optional[str]:
        if not provider:
            return None
        return self.webhook_secrets.get(provider)


def load_config() -> ApiConfig:
    return ApiConfig()
