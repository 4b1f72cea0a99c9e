"""Domain and infrastructure exceptions for occ-core."""

from __future__ import annotations

from typing import Any


class OCCError(Exception):
    """Root exception for the entire occ toolkit."""


class ConcurrencyError(OCCError):
    """Base class for all concurrency-related conflicts.

    Callers catch this to decide whether to re-read and retry."""


class ValidationError(OCCError):
    """Raised when the arguments of a versioned operation are malformed.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


class InfrastructureError(OCCError):
    """Base class for all infrastructure-related errors."""


class PersistenceError(InfrastructureError):
    """Base class for all persistence-related errors."""


class DuplicateDocumentError(PersistenceError):
    """Raised by in-memory stores when an ``_id`` is inserted twice."""


class VersionConflictError(ConcurrencyError, PersistenceError):
    """Raised when a conditional update matched no document.

    The document was either updated concurrently to another version or does
    not exist at all; the two cases are not distinguished.
    """

    def __init__(
        self,
        expected_version: int | None = None,
        filter: dict[str, Any] | None = None,  # noqa: A002
    ) -> None:
        self.expected_version = expected_version
        self.filter = dict(filter or {})
        super().__init__(
            f"Version conflict: no document matched {self.filter!r} "
            f"at expected version {expected_version}"
        )
