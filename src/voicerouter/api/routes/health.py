from __future__ import annotations

from fastapi import APIRouter

from voicerouter.api import __version__
from voicerouter.api.config import load_config

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict:
    """
    Human/debug-friendly health: includes config surface that is safe to expose.
    Secrets are reported by provider name only.
    """
    cfg = load_config()
    return {
        "ok": True,
        "service": "voicerouter-api",
        "version": __version__,
        "verify_webhooks": cfg.verify_webhooks,
        "signed_providers": sorted(cfg.webhook_secrets),
        "signature_header": cfg.signature_header,
    }


@router.get("/healthz")
def healthz() -> dict:
    """
    Liveness: must be fast and never block on external deps.
    """
    return {"ok": True}
