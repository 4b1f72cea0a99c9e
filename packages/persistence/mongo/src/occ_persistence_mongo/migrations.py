"""Migrations that prepare existing collections for versioned updates."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from occ_core.versioning import INITIAL_VERSION, VERSION_FIELD

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection

logger = logging.getLogger("occ.mongo.migrations")


async def backfill_version_field(
    collection: AsyncIOMotorCollection[Any],
    *,
    initial_version: int = INITIAL_VERSION,
    version_field: str = VERSION_FIELD,
) -> int:
    """Give every document without a version field ``initial_version``.

    Idempotent: documents that already carry a version are untouched.
    Returns the number of documents modified.
    """
    query = {version_field: {"$exists": False}}
    missing = await collection.count_documents(query)
    if missing == 0:
        logger.info("%s: all documents already have %r", collection.name, version_field)
        return 0

    logger.info(
        "%s: found %d documents without %r", collection.name, missing, version_field
    )
    result = await collection.update_many(query, {"$set": {version_field: initial_version}})
    logger.info("%s: updated %d documents", collection.name, result.modified_count)
    return result.modified_count


async def ensure_version_index(
    collection: AsyncIOMotorCollection[Any],
    identity_fields: list[str] | None = None,
    *,
    version_field: str = VERSION_FIELD,
    name: str | None = None,
) -> str:
    """Create the compound index ``(identity..., version)`` used by conditional filters.

    ``identity_fields`` defaults to ``["_id"]``. Returns the index name.
    """
    keys = [(field, 1) for field in (identity_fields or ["_id"])]
    keys.append((version_field, 1))
    index_name = name or "_".join(field for field, _ in keys) + "_occ"
    await collection.create_index(keys, name=index_name)
    logger.debug("%s: ensured index %s", collection.name, index_name)
    return index_name
