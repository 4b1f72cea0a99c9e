"""MongoDB ModelMapper with BSON type preservation."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Generic, TypeVar

from bson.decimal128 import Decimal128
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .exceptions import DocumentMappingError

T_Model = TypeVar("T_Model", bound=BaseModel)


def _to_bson(value: Any) -> Any:
    if isinstance(value, Decimal):
        return Decimal128(str(value))
    if isinstance(value, dict):
        return {k: _to_bson(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_bson(v) for v in value]
    return value


def _from_bson(value: Any) -> Any:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, dict):
        return {k: _from_bson(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_bson(v) for v in value]
    return value


class MongoDBModelMapper(Generic[T_Model]):
    """
    Pydantic model ↔ MongoDB document mapper.

    Uses model_dump(mode='python') so PyMongo converts datetime/UUID/bytes
    natively; Decimal ↔ Decimal128 is handled here. The model's id field is
    stored as ``_id``.
    """

    def __init__(self, model_cls: type[T_Model], *, id_field: str = "id") -> None:
        self.model_cls = model_cls
        self._id_field = id_field

    @property
    def id_field(self) -> str:
        return self._id_field

    def to_doc(self, model: T_Model) -> dict[str, Any]:
        data = model.model_dump(mode="python")
        if self._id_field in data:
            data["_id"] = data.pop(self._id_field)
        return _to_bson(data)

    def from_doc(self, doc: dict[str, Any]) -> T_Model:
        doc = dict(doc)
        if "_id" in doc:
            doc[self._id_field] = doc.pop("_id")
        try:
            return self.model_cls.model_validate(_from_bson(doc))
        except PydanticValidationError as e:
            raise DocumentMappingError(
                self.model_cls.__name__, doc.get(self._id_field), str(e)
            ) from e

    def to_fields(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Convert a partial set of model fields into BSON-safe values."""
        return _to_bson(dict(changes))
