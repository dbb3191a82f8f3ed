"""
Pipeline error code to HTTP status mapping.
"""

from fastapi import HTTPException

STATUS_BY_CODE: dict[str, int] = {
    "validation_failed": 422,
    "quota_exceeded": 413,
    "unsupported_type": 415,
    "compression_budget_exceeded": 422,
    "decode_failed": 422,
    "unknown_context": 422,
    "publish_timeout": 504,
    "publish_failed": 503,
    "storage_failed": 503,
}


def http_status_for(code: str | None) -> int:
    return STATUS_BY_CODE.get(code or "", 500)


def pipeline_http_error(code: str | None, message: str | None) -> HTTPException:
    """HTTPException carrying the stable error code for the client."""
    return HTTPException(
        status_code=http_status_for(code),
        detail={"code": code or "pipeline_error", "message": message or "Request failed"},
    )
