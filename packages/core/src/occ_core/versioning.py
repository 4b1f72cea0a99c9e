"""Version-field helpers: initial version and filter/update composition.

Composition helpers always build new mappings; caller-owned filters and
patches may be shared between concurrent calls and are never mutated.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from .primitives.exceptions import ValidationError

VERSION_FIELD = "version"
INITIAL_VERSION = 1


def initialize_version(target: Any, *, version_field: str = VERSION_FIELD) -> None:
    """Set the version of a new document to 1 if it is unset.

    ``target`` is either a mutable mapping (a raw document) or an object
    exposing the version as an attribute (e.g. a pydantic model). Unset
    means ``0``, ``None`` or missing; any other value is left untouched.
    """
    if isinstance(target, MutableMapping):
        if not target.get(version_field):
            target[version_field] = INITIAL_VERSION
        return
    if not getattr(target, version_field, None):
        setattr(target, version_field, INITIAL_VERSION)


def get_version(document: Mapping[str, Any], *, version_field: str = VERSION_FIELD) -> int:
    """Return the document's version (0 if not present)."""
    return document.get(version_field) or 0


def is_valid_version(value: Any) -> bool:
    """A stored version is a positive int; bools are rejected."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def compose_version_filter(
    identity_filter: Mapping[str, Any],
    expected_version: int,
    *,
    version_field: str = VERSION_FIELD,
) -> dict[str, Any]:
    """Return ``identity_filter`` pinned to ``expected_version``.

    Raises:
        ValidationError: If the identity filter already constrains the
            version field.
    """
    if version_field in identity_filter:
        raise ValidationError(
            {
                "identity_filter": [
                    f"must not constrain {version_field!r}; "
                    "pass it as expected_version"
                ]
            }
        )
    return {**identity_filter, version_field: expected_version}


def compose_version_increment(
    update_patch: Mapping[str, Any],
    *,
    version_field: str = VERSION_FIELD,
) -> dict[str, Any]:
    """Return ``update_patch`` with an atomic ``$inc`` of the version by one.

    The patch is either a partial document (wrapped into ``$set``) or a
    MongoDB operator document. Nested operator mappings are copied before
    being extended.

    Raises:
        ValidationError: If the patch mixes operators and plain fields, or
            if it writes the version field itself.
    """
    operator_keys = [key for key in update_patch if key.startswith("$")]
    if operator_keys and len(operator_keys) != len(update_patch):
        raise ValidationError(
            {"update_patch": ["cannot mix update operators and plain fields"]}
        )

    if operator_keys:
        update: dict[str, Any] = {}
        for operator, fields in update_patch.items():
            if not isinstance(fields, Mapping):
                raise ValidationError(
                    {"update_patch": [f"{operator} expects a mapping of fields"]}
                )
            renames_onto_version = (
                operator == "$rename" and version_field in fields.values()
            )
            if version_field in fields or renames_onto_version:
                raise ValidationError(
                    {"update_patch": [f"{version_field!r} is managed by the updater"]}
                )
            update[operator] = dict(fields)
    else:
        if version_field in update_patch:
            raise ValidationError(
                {"update_patch": [f"{version_field!r} is managed by the updater"]}
            )
        update = {"$set": dict(update_patch)} if update_patch else {}

    update.setdefault("$inc", {})[version_field] = 1
    return update
