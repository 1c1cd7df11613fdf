"""Entity <-> JSON conversion.

Uses a pydantic TypeAdapter so any type pydantic understands (BaseModel
subclasses, dataclasses, TypedDicts) can be stored.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Mapping, Optional, Type, TypeVar, Union

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError
from typing_extensions import is_typeddict

from .errors import DeserializationError, SerializationError
from .naming import entity_name_of

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntitySerializer(Generic[T]):
    """Converts entities of one type to and from canonical JSON text."""

    def __init__(self, entity_type: Type[T], type_name: Optional[str] = None):
        self.entity_type = entity_type
        self.type_name = entity_name_of(entity_type, type_name)
        self._adapter: TypeAdapter[T] = TypeAdapter(entity_type)

    def serialize(self, entity: T) -> str:
        """Serialize an entity to JSON text.

        Raises:
            SerializationError: If the entity is not of the bound type or
                cannot be encoded.
        """
        self._check_type(entity)
        try:
            return self._adapter.dump_json(entity).decode("utf-8")
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise SerializationError(self.type_name, e) from e

    def _check_type(self, entity: Any) -> None:
        # TypedDicts and generic aliases reject isinstance(); validate them instead.
        if isinstance(self.entity_type, type) and not is_typeddict(self.entity_type):
            if not isinstance(entity, self.entity_type):
                raise SerializationError(
                    self.type_name,
                    TypeError(f"expected {self.type_name}, got {type(entity).__name__}"),
                )
            return
        try:
            self._adapter.validate_python(entity, strict=True)
        except (ValidationError, TypeError) as e:
            raise SerializationError(self.type_name, e) from e

    def deserialize(self, payload: Union[str, bytes, Mapping[str, Any], None]) -> T:
        """Parse a stored payload into the entity type.

        Accepts raw JSON text/bytes or an already decoded mapping.

        Raises:
            DeserializationError: If the payload is missing or invalid.
        """
        if payload is None:
            raise DeserializationError(self.type_name, payload)
        try:
            if isinstance(payload, (str, bytes)):
                return self._adapter.validate_json(payload)
            return self._adapter.validate_python(payload)
        except ValidationError as e:
            logger.debug(f"Rejected payload for {self.type_name}: {e}")
            raise DeserializationError(self.type_name, payload, e) from e
