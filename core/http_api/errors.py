"""
Roombook HTTP API - Error Mapping
=================================
Stable transport error mapping for action rejections and handler failures.
Codes are passed through unchanged; the caller localizes messages.
"""

from __future__ import annotations

from typing import Any, Optional

from core.commands.rejection import RejectionReason
from core.http_api.contracts import HttpApiErrorBody, HttpApiResponse


def error_response(
    *,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(
        ok=False,
        error=HttpApiErrorBody(
            code=code,
            message=message,
            details=details or {},
        ),
    ).to_dict()


def success_response(data: Any) -> dict[str, Any]:
    return HttpApiResponse(ok=True, data=data).to_dict()


def map_rejection_reason(reason: RejectionReason) -> HttpApiErrorBody:
    return HttpApiErrorBody(
        code=reason.code,
        message=reason.message,
        details={
            "policy_name": reason.policy_name,
            "message_key": f"rejection.{reason.code.lower()}",
        },
    )


def rejection_response(
    reason: RejectionReason,
    *,
    extra_details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    mapped = map_rejection_reason(reason)
    details = dict(mapped.details)
    if extra_details:
        details.update(extra_details)
    return error_response(
        code=mapped.code,
        message=mapped.message,
        details=details,
    )


# Transport status per error code.
HTTP_STATUS_BY_CODE: dict[str, int] = {
    "INVALID_REQUEST": 400,
    "NOT_FOUND": 404,
    "PERMISSION_DENIED": 403,
    "ALREADY_BANNED": 403,
    "POLICY_VIOLATION": 409,
    "INVALID_TRANSITION": 409,
    "METHOD_NOT_ALLOWED": 405,
    "HANDLER_EXECUTION_FAILED": 500,
}


def http_status_for(payload: dict[str, Any]) -> int:
    if payload.get("ok"):
        return 200
    return HTTP_STATUS_BY_CODE.get(payload["error"]["code"], 400)
