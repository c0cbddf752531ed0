from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from voicerouter.core.error_codes import ErrorCode, is_error_code
from voicerouter.core.errors import create_error, create_error_from_exception
from voicerouter.core.providers.base import fail, obj
from voicerouter.core.providers.registry import get_mapper
from voicerouter.core_types import UnifiedTranscriptResponse
from voicerouter.utils.logger import get_logger

logger = get_logger("voicerouter.core")


def _body_message(body: Any) -> Optional[str]:
    if isinstance(body, str):
        return body or None
    b = obj(body)
    for key in ("message", "error", "detail", "error_message"):
        value = b.get(key)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, Mapping) and isinstance(value.get("message"), str):
            return value["message"]
    return None


def normalize_response(
    provider: str,
    raw: Any,
    *,
    success: bool = True,
    http_status: Optional[int] = None,
) -> UnifiedTranscriptResponse:
    """
    Turn a provider payload into a UnifiedTranscriptResponse.

    success=False marks `raw` as the body of a rejected call: the envelope
    carries an error built from it (message from the body, status from
    http_status) and keeps the body as raw. A payload that is not a JSON
    object, or that the provider mapper cannot read, yields PARSE_ERROR.
    Never raises for payload content; an unsupported provider tag raises
    KeyError.
    """
    mapper = get_mapper(provider)

    if not success:
        code = obj(raw).get("code")
        error = create_error(
            ErrorCode(code) if is_error_code(code) else ErrorCode.UNKNOWN_ERROR,
            _body_message(raw),
            status_code=http_status,
        )
        logger.info("NORMALIZE_REJECTED provider=%s status=%s code=%s", provider, http_status, error.code.value)
        return fail(provider, error, raw)

    if not isinstance(raw, Mapping):
        logger.warning("NORMALIZE_PARSE_ERROR provider=%s type=%s", provider, type(raw).__name__)
        return fail(
            provider,
            create_error(ErrorCode.PARSE_ERROR, details={"payload_type": type(raw).__name__}, status_code=http_status),
            raw,
        )

    try:
        result = mapper.map_transcript(raw)
    except Exception as e:
        logger.warning("NORMALIZE_PARSE_ERROR provider=%s err=%s", provider, e, exc_info=True)
        return fail(provider, create_error_from_exception(e, ErrorCode.PARSE_ERROR, http_status), raw)

    logger.debug(
        "NORMALIZE provider=%s success=%s status=%s",
        provider,
        result.success,
        result.data.status if result.data else None,
    )
    return result


def normalize_exception(
    provider: str,
    error: Any,
    *,
    raw: Any = None,
    default_code: Union[ErrorCode, str] = ErrorCode.UNKNOWN_ERROR,
) -> UnifiedTranscriptResponse:
    """
    Failure envelope for an exception raised by the transport layer.

    When `raw` is not given and the exception carries a decoded body
    (TransportError.body), that body is kept as raw.
    """
    get_mapper(provider)  # rejects unsupported tags

    std = create_error_from_exception(error, default_code)
    if raw is None:
        raw = getattr(error, "body", None)
    logger.info("NORMALIZE_EXCEPTION provider=%s code=%s status=%s", provider, std.code.value, std.status_code)
    return fail(provider, std, raw)


__all__ = ["normalize_response", "normalize_exception"]
