"""
MedAI Backend — Envelope & Response Schemas
=============================================

What:  The uniform `{success, data, error?}` wrapper returned by loaders and
       routes, plus the response models of the diagnostic endpoints.
Why:   Callers branch on `success` instead of catching exceptions, and every
       JSON body the API produces has the same outer shape.

Envelope invariant:
    success=True   → data is not None (an empty list is fine)
    success=False  → data is None and error carries a human-readable message

The `kind` field travels with failed envelopes so route adapters can pick a
status code; it is excluded from serialization.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for models whose JSON form uses camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    STORE_MISSING = "store_missing"
    PARSE_ERROR = "parse_error"
    VALIDATION_ERROR = "validation_error"
    UPSTREAM_ERROR = "upstream_error"
    INTERNAL_ERROR = "internal_error"


# Only an entity missing from a successfully loaded collection is a client
# error; every other failure means the backing content or a dependency broke.
STATUS_BY_ERROR_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORE_MISSING: 500,
    ErrorKind.PARSE_ERROR: 500,
    ErrorKind.VALIDATION_ERROR: 500,
    ErrorKind.UPSTREAM_ERROR: 500,
    ErrorKind.INTERNAL_ERROR: 500,
}


class Envelope(BaseModel, Generic[T]):
    """
    Success/failure wrapper for loader, lookup and route results.

    Build instances through `ok()`, `failure()` or `from_exception()`; the
    model validator rejects any combination that breaks the invariant.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None
    kind: Optional[ErrorKind] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def check_invariant(self) -> "Envelope[T]":
        if self.success:
            if self.data is None:
                raise ValueError("successful envelope must carry data")
            if self.error is not None:
                raise ValueError("successful envelope cannot carry an error")
        else:
            if self.data is not None:
                raise ValueError("failed envelope must have data=None")
            if not self.error:
                raise ValueError("failed envelope must carry an error message")
        return self

    @classmethod
    def ok(cls, data: Any, message: Optional[str] = None) -> "Envelope[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind = ErrorKind.INTERNAL_ERROR) -> "Envelope[T]":
        return cls(success=False, data=None, error=error, kind=kind)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Envelope[T]":
        """Folds any exception into a failed envelope, keeping its ErrorKind."""
        kind = getattr(exc, "kind", ErrorKind.INTERNAL_ERROR)
        message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
        return cls.failure(message, kind)

    @property
    def status_code(self) -> int:
        if self.success:
            return 200
        return STATUS_BY_ERROR_KIND.get(self.kind or ErrorKind.INTERNAL_ERROR, 500)


class ErrorResponse(BaseModel):
    """Failure body documented in OpenAPI for every route."""

    success: bool = False
    error: str = Field(description="Human-readable error message")
    data: None = None
    details: Optional[Any] = Field(default=None, description="Diagnostic detail or per-field issues")


# ══════════════════════════════════════════════════════════════════════════
# Pagination
# ══════════════════════════════════════════════════════════════════════════


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class Page(CamelModel, Generic[T]):
    items: List[T]
    pagination: Pagination


# ══════════════════════════════════════════════════════════════════════════
# Diagnostics
# ══════════════════════════════════════════════════════════════════════════


class HealthResponse(CamelModel):
    """
    What:  Liveness report returned by GET /health.
    Why:   A backend that cannot read its content directory is effectively down.
    """

    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    data_root: str = Field(description="readable or unreadable")
    uptime_seconds: float = Field(description="Seconds since service started")


class HealthIssue(CamelModel):
    file: str
    type: str = Field(description="error or warning")
    message: str


class ContentHealthReport(CamelModel):
    """Per-file summary of the backing store produced by the content health check."""

    total_files: int = 0
    valid_files: int = 0
    invalid_files: int = 0
    warnings: int = 0
    errors: List[HealthIssue] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# Search
# ══════════════════════════════════════════════════════════════════════════


class SearchResult(CamelModel):
    id: str
    type: str
    title: str
    description: str
    url: str
    relevance_score: float
    highlights: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class TypeFacet(CamelModel):
    type: str
    count: int


class TagFacet(CamelModel):
    tag: str
    count: int


class SearchFacets(CamelModel):
    types: List[TypeFacet] = Field(default_factory=list)
    tags: List[TagFacet] = Field(default_factory=list)


class SearchResponse(CamelModel):
    results: List[SearchResult] = Field(default_factory=list)
    total: int = 0
    query: str = ""
    suggestions: List[str] = Field(default_factory=list)
    facets: SearchFacets = Field(default_factory=SearchFacets)


class RebuildResponse(CamelModel):
    success: bool = True
    message: str
    timestamp: datetime
    data: Dict[str, Any] = Field(default_factory=dict)


# ══════════════════════════════════════════════════════════════════════════
# Contact
# ══════════════════════════════════════════════════════════════════════════


class ContactResponse(BaseModel):
    success: bool = True
    message: str
