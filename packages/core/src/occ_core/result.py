"""UpdateResult — tagged outcome of a conditional update."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .primitives.exceptions import VersionConflictError
from .versioning import VERSION_FIELD


class UpdateStatus(str, Enum):
    UPDATED = "updated"
    CONFLICT = "conflict"
    STORE_FAILURE = "store_failure"


def default_filter_factory() -> dict[str, Any]:
    return {}


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of :func:`~occ_core.updater.update_if_current`.

    Exactly one of three kinds, selected by ``status``:

    * ``UPDATED``: ``document`` holds the post-image.
    * ``CONFLICT``: nothing matched ``filter``; no mutation happened.
    * ``STORE_FAILURE``: ``error`` holds the exception the store raised,
      untouched; no mutation happened.

    Usage::

        result = await update_if_current(store, {"_id": doc_id}, patch, 5)
        match result:
            case UpdateResult(status=UpdateStatus.UPDATED, document=doc):
                ...
            case UpdateResult(status=UpdateStatus.CONFLICT):
                ...  # re-read and decide whether to retry

        doc = result.unwrap()  # or raise
    """

    status: UpdateStatus
    document: dict[str, Any] | None = None
    error: Exception | None = None
    expected_version: int | None = None
    filter: dict[str, Any] = field(default_factory=default_filter_factory)
    version_field: str = VERSION_FIELD

    # ── Factory methods ──────────────────────────────────────────

    @classmethod
    def updated(
        cls,
        document: dict[str, Any],
        *,
        expected_version: int | None = None,
        version_field: str = VERSION_FIELD,
    ) -> UpdateResult:
        return cls(
            UpdateStatus.UPDATED,
            document=document,
            expected_version=expected_version,
            version_field=version_field,
        )

    @classmethod
    def conflict(
        cls,
        expected_version: int,
        filter: dict[str, Any],  # noqa: A002
        *,
        version_field: str = VERSION_FIELD,
    ) -> UpdateResult:
        return cls(
            UpdateStatus.CONFLICT,
            expected_version=expected_version,
            filter=filter,
            version_field=version_field,
        )

    @classmethod
    def store_failure(
        cls,
        error: Exception,
        *,
        expected_version: int | None = None,
        version_field: str = VERSION_FIELD,
    ) -> UpdateResult:
        return cls(
            UpdateStatus.STORE_FAILURE,
            error=error,
            expected_version=expected_version,
            version_field=version_field,
        )

    # ── Predicates ───────────────────────────────────────────────

    @property
    def is_updated(self) -> bool:
        return self.status is UpdateStatus.UPDATED

    @property
    def is_conflict(self) -> bool:
        return self.status is UpdateStatus.CONFLICT

    @property
    def is_store_failure(self) -> bool:
        return self.status is UpdateStatus.STORE_FAILURE

    @property
    def version(self) -> int | None:
        """Version of the post-image, or None unless updated."""
        if self.document is None:
            return None
        return self.document.get(self.version_field)

    def __bool__(self) -> bool:
        return self.is_updated

    def unwrap(self) -> dict[str, Any]:
        """Return the post-image or raise the failure.

        Raises:
            VersionConflictError: On a conflict.
            Exception: The original store exception, on a store failure.
        """
        if self.status is UpdateStatus.UPDATED and self.document is not None:
            return self.document
        if self.status is UpdateStatus.STORE_FAILURE and self.error is not None:
            raise self.error
        raise VersionConflictError(self.expected_version, self.filter)
