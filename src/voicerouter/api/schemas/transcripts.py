from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
    request_id: str = ""


class ErrorResponse(BaseModel):
    error: ErrorBody


class NormalizeRequest(BaseModel):
    provider: str = Field(..., description="Provider tag, e.g. gladia / deepgram / azure-stt")
    raw: Any = Field(None, description="Provider payload exactly as received (decoded JSON)")
    success: bool = Field(True, description="False when `raw` is the body of a rejected provider call")
    http_status: Optional[int] = Field(None, description="HTTP status of the provider call, if any")


class ProvidersResponse(BaseModel):
    transcripts: List[str]
    webhooks: List[str]
