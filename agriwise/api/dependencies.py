from fastapi import Request, status
from fastapi.responses import JSONResponse

from agriwise.core.config import settings
from agriwise.core.exceptions import AdvisoryError, ErrorKind
from agriwise.services.advisory_service import AdvisoryService

STATUS_BY_KIND = {
    ErrorKind.INVALID_ATTACHMENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.UPSTREAM_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.NETWORK_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.PARSE_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.FATAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

USER_MESSAGES = {
    ErrorKind.INVALID_ATTACHMENT: "The uploaded file could not be used. Please attach a clear photo.",
    ErrorKind.RATE_LIMITED: "The advisor is busy right now. Please try again in a minute.",
    ErrorKind.UPSTREAM_UNAVAILABLE: "The advisor is temporarily unavailable. Please try again.",
    ErrorKind.NETWORK_ERROR: "Could not reach the advisor. Check your connection and try again.",
    ErrorKind.PARSE_ERROR: "The advisor's answer could not be understood. Please try again.",
    ErrorKind.FATAL: "The request was rejected by the advisor.",
}


def get_advisory_service(request: Request) -> AdvisoryService:
    return request.app.state.advisory_service


async def advisory_error_handler(request: Request, exc: AdvisoryError) -> JSONResponse:
    headers = (
        {"Retry-After": str(settings.RATE_LIMIT_RETRY_AFTER_SECONDS)}
        if exc.kind == ErrorKind.RATE_LIMITED
        else None
    )
    return JSONResponse(
        status_code=STATUS_BY_KIND[exc.kind],
        content={
            "detail": {
                "kind": exc.kind.value,
                "retryable": exc.retryable or exc.kind == ErrorKind.NETWORK_ERROR,
                "message": USER_MESSAGES[exc.kind],
            }
        },
        headers=headers,
    )
