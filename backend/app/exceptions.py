"""
MedAI Backend — Custom Exception Hierarchy
============================================

What:  Defines application-specific exceptions for content retrieval failures.
Why:   Each failure carries an ErrorKind so loaders can fold it into an
       envelope and route adapters can pick the HTTP status from one mapping.
How:   Each exception class carries a message, an optional context dict and
       a class-level `kind`.
Who:   Raised inside validators, loaders and services; converted to envelopes
       at the loader boundary or caught by the global handlers in main.py.

Exception Hierarchy:
    ContentError (base)
    ├── NotFoundError              → not_found         (404)
    ├── ContentStoreMissingError   → store_missing     (500)
    ├── ParseError                 → parse_error       (500)
    ├── ValidationError            → validation_error  (500 for stored content,
    │                                                   400 for client input)
    └── UpstreamError              → upstream_error    (500)

Rate limiting answers 429 straight from RateLimitMiddleware and has no
exception class.
"""

from typing import Any, Dict, Optional

from app.schemas.envelope import ErrorKind


class ContentError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Human-readable description (safe to put in an envelope)
        context:  Additional debug info (logged, NOT returned to the client)
        kind:     ErrorKind used when the error is folded into an envelope
    """

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ContentError):
    """
    Raised when a record (stored content or client input) fails its schema.

    `field` names the FIRST offending field as a dotted path
    (e.g. "education.0.year"); validation stops reporting after it.
    """

    kind = ErrorKind.VALIDATION_ERROR

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ContentError):
    """
    Raised when the collection loaded fine but the requested entity is absent.

    HTTP: 404 Not Found
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ContentStoreMissingError(ContentError):
    """
    Raised when a collection's backing file (or the data root) does not exist.

    Distinct from NotFoundError: the *store* is missing, not an entity, so
    routes answer 500 rather than 404.
    """

    kind = ErrorKind.STORE_MISSING

    def __init__(
        self,
        message: str = "Content store not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ParseError(ContentError):
    """Raised when backing content cannot be read or is not well-formed JSON."""

    kind = ErrorKind.PARSE_ERROR

    def __init__(
        self,
        message: str = "Content could not be parsed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(ContentError):
    """
    Raised when a dependent service fails.

    When: The search index rebuild could not load one of the collections it
    indexes. The rebuild is all-or-nothing, so one failed collection fails it.
    """

    kind = ErrorKind.UPSTREAM_ERROR

    def __init__(
        self,
        message: str = "A dependent service failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

