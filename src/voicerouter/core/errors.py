from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any, Mapping, Optional, Union

from voicerouter.core.error_codes import ERROR_MESSAGES, ErrorCode, is_error_code
from voicerouter.core_types import StandardError


class TransportError(Exception):
    """
    Raised by the HTTP collaborator when a provider call is rejected.

    Carries the HTTP status and the (already decoded) response body so the
    body can be kept as `raw` on the failure envelope.
    """

    def __init__(
        self,
        message: str = "",
        *,
        status_code: Optional[int] = None,
        body: Any = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body
        self.code = code


def _jsonable(x: Any) -> Any:
    """Best-effort JSON-safe view of a caught value, for `details`."""
    if x is None or isinstance(x, (str, int, float, bool)):
        return x
    if isinstance(x, BaseException):
        return {
            "exception_class": x.__class__.__name__,
            "args": [_jsonable(a) for a in x.args],
        }
    if isinstance(x, Mapping):
        return {str(k): _jsonable(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [_jsonable(v) for v in x]
    if is_dataclass(x) and not isinstance(x, type):
        return _jsonable(asdict(x))
    if hasattr(x, "model_dump") and callable(getattr(x, "model_dump")):
        return x.model_dump()
    return _safe_str(x)


def _details(x: Any) -> Any:
    try:
        return _jsonable(x)
    except Exception:
        # self-referencing containers, hostile __iter__/__str__
        return _safe_str(x)


def _safe_str(x: Any) -> str:
    try:
        return str(x)
    except Exception:
        return f"<unprintable {type(x).__name__}>"


def _field(value: Any, *names: str) -> Any:
    """Read the first present attribute/key among `names`, or None."""
    for name in names:
        if isinstance(value, Mapping):
            found = value.get(name)
        else:
            try:
                found = getattr(value, name, None)
            except Exception:
                found = None
        if found is not None:
            return found
    return None


def _as_status(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def create_error(
    code: Union[ErrorCode, str],
    custom_message: Optional[str] = None,
    details: Any = None,
    *,
    status_code: Optional[int] = None,
) -> StandardError:
    code = ErrorCode(code)
    return StandardError(
        code=code,
        message=custom_message or ERROR_MESSAGES[code],
        status_code=status_code,
        details=details,
    )


def create_error_from_exception(
    error: Any,
    default_code: Union[ErrorCode, str] = ErrorCode.UNKNOWN_ERROR,
    status_code: Optional[int] = None,
) -> StandardError:
    """
    Convert any caught value into a StandardError. Never raises.

    Exceptions, plain objects and mappings exposing `message`, `code` and
    `status_code`/`statusCode` have those preferred over the defaults. A code
    outside the taxonomy is ignored. An explicit `status_code` wins over the
    one carried by the value.
    """
    default_code = ErrorCode(default_code)

    if error is None or isinstance(error, (str, int, float, bool)):
        text = "" if error is None else _safe_str(error)
        return StandardError(
            code=default_code,
            message=text or ERROR_MESSAGES[default_code],
            status_code=status_code,
            details=error,
        )

    raw_code = _field(error, "code")
    code = ErrorCode(raw_code) if is_error_code(raw_code) else default_code

    message = _field(error, "message")
    if not isinstance(message, str) or not message:
        message = _safe_str(error) if isinstance(error, BaseException) else ""
    if not message and isinstance(error, Mapping):
        err = _field(error, "error", "detail")
        message = err if isinstance(err, str) else ""

    found_status = _as_status(_field(error, "status_code", "statusCode", "status"))
    if found_status is None:
        found_status = _as_status(_field(_field(error, "response"), "status_code", "status"))

    return StandardError(
        code=code,
        message=message or ERROR_MESSAGES[code],
        status_code=status_code if status_code is not None else found_status,
        details=_details(error),
    )


__all__ = [
    "ErrorCode",
    "ERROR_MESSAGES",
    "TransportError",
    "create_error",
    "create_error_from_exception",
]
