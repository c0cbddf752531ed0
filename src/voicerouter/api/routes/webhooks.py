from __future__ import annotations

import json
from typing import Any, Optional

from fastapi import APIRouter, Request

from voicerouter.api.config import load_config
from voicerouter.api.errors import InvalidPayloadError, UnknownProviderError, WebhookRejectedError
from voicerouter.api.schemas.transcripts import ErrorResponse
from voicerouter.core.webhooks import WebhookRouter, WebhookVerificationOptions
from voicerouter.core_types import WebhookRouterResult
from voicerouter.utils.logger import get_logger

logger = get_logger("voicerouter.api")

router = APIRouter(prefix="/v1/webhooks", tags=["webhooks"])

_webhook_router = WebhookRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _decode(body: bytes) -> Any:
    if not body:
        raise InvalidPayloadError("empty webhook body")
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidPayloadError("webhook body is not valid JSON", details={"reason": str(e)}) from e


async def _handle(request: Request, provider: Optional[str]) -> WebhookRouterResult:
    cfg = load_config()
    body = await request.body()
    payload = _decode(body)
    query_params = dict(request.query_params)
    user_agent = request.headers.get("user-agent")

    target = provider or _webhook_router.detect_provider(payload, query_params=query_params, user_agent=user_agent)

    verification = None
    secret = cfg.secret_for(target)
    if cfg.verify_webhooks and secret:
        verification = WebhookVerificationOptions(
            signature=request.headers.get(cfg.signature_header),
            secret=secret,
            raw_body=body,
        )

    result = _webhook_router.route(
        payload,
        provider=target,
        verification=verification,
        verify_signature=cfg.verify_webhooks,
        query_params=query_params or None,
        user_agent=user_agent,
    )
    if not result.success:
        raise WebhookRejectedError(
            result.error or "webhook rejected",
            unauthorized=result.verified is False,
            details={"provider": result.provider} if result.provider else None,
        )

    logger.info(f"WEBHOOK_ACCEPTED provider={result.provider} event={result.event.event_type if result.event else None}")
    return result


@router.post("", response_model=WebhookRouterResult, responses=_ERROR_RESPONSES)
async def receive(request: Request) -> WebhookRouterResult:
    return await _handle(request, None)


@router.post("/{provider}", response_model=WebhookRouterResult, responses=_ERROR_RESPONSES)
async def receive_for_provider(provider: str, request: Request) -> WebhookRouterResult:
    if _webhook_router.get_handler(provider) is None:
        raise UnknownProviderError(provider)
    return await _handle(request, provider)
