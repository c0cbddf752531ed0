from __future__ import annotations

from fastapi import APIRouter

from voicerouter.api.errors import UnknownProviderError
from voicerouter.api.schemas.transcripts import ErrorResponse, NormalizeRequest, ProvidersResponse
from voicerouter.core.assemble import normalize_response
from voicerouter.core.providers import is_supported, list_providers
from voicerouter.core.webhooks import create_webhook_router
from voicerouter.core_types import UnifiedTranscriptResponse

router = APIRouter(prefix="/v1", tags=["transcripts"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("/providers", response_model=ProvidersResponse)
def providers() -> ProvidersResponse:
    return ProvidersResponse(
        transcripts=list_providers(),
        webhooks=create_webhook_router().providers(),
    )


@router.post(
    "/transcripts/normalize",
    response_model=UnifiedTranscriptResponse,
    responses=_ERROR_RESPONSES,
)
def normalize(req: NormalizeRequest) -> UnifiedTranscriptResponse:
    """
    Always 200 for a supported provider: success or failure is carried by
    the envelope itself.
    """
    if not is_supported(req.provider):
        raise UnknownProviderError(req.provider)
    return normalize_response(req.provider, req.raw, success=req.success, http_status=req.http_status)
