from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, Field

from agriwise.core.exceptions import AdvisoryError, ErrorKind, error_for_kind

T = TypeVar("T")


class GroundingKind(str, Enum):
    WEB = "web"
    MAPS = "maps"


class GroundingSource(BaseModel):
    """A citation the upstream service attached after using a tool."""

    kind: GroundingKind
    uri: str
    title: Optional[str] = None
    snippets: List[str] = Field(default_factory=list)


class Grounded(BaseModel, Generic[T]):
    """A decoded value with its grounding sources kept beside it."""

    value: T
    sources: List[GroundingSource] = Field(default_factory=list)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    sources: tuple[GroundingSource, ...] = ()

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str

    def unwrap(self) -> Any:
        raise self.to_exception()

    def to_exception(self) -> AdvisoryError:
        return error_for_kind(self.kind, self.detail)


TypedResult = Union[Ok[T], Err]


@dataclass(frozen=True)
class UpstreamResponse:
    """Plain view of one upstream reply, free of SDK types."""

    text: Optional[str] = None
    inline_data: tuple[tuple[str, bytes], ...] = ()
    grounding_chunks: tuple[dict, ...] = ()
    finish_reason: Optional[str] = None
