"""Conditional (compare-and-swap) update of versioned documents."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from .primitives.exceptions import ValidationError
from .result import UpdateResult
from .versioning import (
    VERSION_FIELD,
    compose_version_filter,
    compose_version_increment,
    initialize_version,
    is_valid_version,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .ports.document_store import IDocumentStore


async def update_if_current(
    store: IDocumentStore,
    identity_filter: Mapping[str, Any],
    update_patch: Mapping[str, Any],
    expected_version: int,
    *,
    session: Any = None,
    max_time_ms: int | None = None,
    version_field: str = VERSION_FIELD,
) -> UpdateResult:
    """Apply ``update_patch`` only if the document is still at ``expected_version``.

    A single atomic find-and-modify is issued with the identity filter
    pinned to ``expected_version`` and the patch extended with a version
    increment. ``session`` and ``max_time_ms`` are forwarded verbatim.

    Returns:
        ``UpdateResult.updated`` with the post-image (its version is
        ``expected_version + 1``); ``UpdateResult.conflict`` when nothing
        matched, whether the version was stale or the document is missing;
        ``UpdateResult.store_failure`` carrying the store's exception.

    Raises:
        ValidationError: If the arguments are malformed. Raised before any
            store I/O.
    """
    if not is_valid_version(expected_version):
        raise ValidationError(
            {"expected_version": [f"must be a positive int, got {expected_version!r}"]}
        )
    filter_ = compose_version_filter(
        identity_filter, expected_version, version_field=version_field
    )
    update = compose_version_increment(update_patch, version_field=version_field)

    try:
        document = await store.find_one_and_update(
            filter_, update, session=session, max_time_ms=max_time_ms
        )
    except Exception as exc:  # noqa: BLE001
        return UpdateResult.store_failure(
            exc, expected_version=expected_version, version_field=version_field
        )

    if document is None:
        return UpdateResult.conflict(
            expected_version, filter_, version_field=version_field
        )
    return UpdateResult.updated(
        document, expected_version=expected_version, version_field=version_field
    )


async def insert_versioned(
    store: IDocumentStore,
    document: Mapping[str, Any],
    *,
    session: Any = None,
    version_field: str = VERSION_FIELD,
) -> dict[str, Any]:
    """Insert the first revision of a document and return the stored copy.

    The caller's mapping is copied; the copy gets version 1 unless it
    already carries a version, and receives the ``_id`` assigned by the
    store.
    """
    doc = copy.deepcopy(dict(document))
    initialize_version(doc, version_field=version_field)
    doc["_id"] = await store.insert_one(doc, session=session)
    return doc


class ConditionalUpdater:
    """:func:`update_if_current` bound to one store and version field.

    Usage::

        updater = ConditionalUpdater(store)
        created = await updater.insert({"_id": "a1", "name": "draft"})
        result = await updater.update_if_current(
            {"_id": "a1"}, {"name": "final"}, created["version"]
        )
    """

    def __init__(
        self,
        store: IDocumentStore,
        *,
        version_field: str = VERSION_FIELD,
    ) -> None:
        self._store = store
        self._version_field = version_field

    @property
    def store(self) -> IDocumentStore:
        return self._store

    @property
    def version_field(self) -> str:
        return self._version_field

    async def insert(
        self,
        document: Mapping[str, Any],
        *,
        session: Any = None,
    ) -> dict[str, Any]:
        return await insert_versioned(
            self._store,
            document,
            session=session,
            version_field=self._version_field,
        )

    async def update_if_current(
        self,
        identity_filter: Mapping[str, Any],
        update_patch: Mapping[str, Any],
        expected_version: int,
        *,
        session: Any = None,
        max_time_ms: int | None = None,
    ) -> UpdateResult:
        return await update_if_current(
            self._store,
            identity_filter,
            update_patch,
            expected_version,
            session=session,
            max_time_ms=max_time_ms,
            version_field=self._version_field,
        )
