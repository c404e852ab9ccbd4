from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_ATTACHMENT = "invalid_attachment"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    NETWORK_ERROR = "network_error"
    FATAL = "fatal"
    PARSE_ERROR = "parse_error"


class AdvisoryError(Exception):
    """Base class for every classified failure of an advisory call."""

    kind: ErrorKind = ErrorKind.FATAL
    retryable: bool = False

    def __init__(self, detail: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, detail={self.detail!r})"


class InvalidAttachment(AdvisoryError):
    kind = ErrorKind.INVALID_ATTACHMENT


class RateLimited(AdvisoryError):
    kind = ErrorKind.RATE_LIMITED
    retryable = True


class UpstreamUnavailable(AdvisoryError):
    kind = ErrorKind.UPSTREAM_UNAVAILABLE
    retryable = True


class NetworkError(AdvisoryError):
    kind = ErrorKind.NETWORK_ERROR


class FatalUpstreamError(AdvisoryError):
    kind = ErrorKind.FATAL


class ParseError(AdvisoryError):
    kind = ErrorKind.PARSE_ERROR


ERRORS_BY_KIND = {
    error_cls.kind: error_cls
    for error_cls in (
        InvalidAttachment,
        RateLimited,
        UpstreamUnavailable,
        NetworkError,
        FatalUpstreamError,
        ParseError,
    )
}


def error_for_kind(kind: ErrorKind, detail: str) -> AdvisoryError:
    return ERRORS_BY_KIND[kind](detail)
