"""
Error types raised by the CDM store.

- CDMError: base class, carries a code and context details
- NotFoundError: identifier (or relationship) absent
- ConflictError: create on an identifier that already exists
- ValidationError: malformed or inconsistent input document
- ConsistencyError: a post-condition did not hold (e.g. delete had no effect)

The store raises these; the HTTP layer maps them to status codes.
"""

from typing import Any, Optional


class CDMError(Exception):
    """Base exception for store errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "CDM_ERROR"
        self.details = details or {}


class NotFoundError(CDMError):
    status_code = 404

    def __init__(self, kind: str, uuid: str) -> None:
        super().__init__(
            f"{kind.capitalize()} with ID {uuid} does not exist.",
            code="NOT_FOUND",
            details={"kind": kind, "uuid": uuid},
        )
        self.kind = kind
        self.uuid = uuid


class ConflictError(CDMError):
    status_code = 409

    def __init__(self, kind: str, uuid: str, hint: Optional[str] = None) -> None:
        super().__init__(
            f"{kind.capitalize()} with ID {uuid} already exists.",
            code="CONFLICT",
            details={"kind": kind, "uuid": uuid, "hint": hint},
        )
        self.kind = kind
        self.uuid = uuid


class ValidationError(CDMError):
    status_code = 422

    def __init__(self, message: str, errors: Optional[list[str]] = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details={"errors": errors or []})
        self.errors = errors or []


class ConsistencyError(CDMError):
    status_code = 500

    def __init__(self, message: str, uuid: Optional[str] = None) -> None:
        super().__init__(message, code="CONSISTENCY_ERROR", details={"uuid": uuid})
        self.uuid = uuid
