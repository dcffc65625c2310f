"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

import os
import re
import time
from dataclasses import dataclass
from typing import Self

from ecommerce_api.domain.exceptions import InvalidIdError

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


@dataclass(frozen=True)
class ObjectId:
    """Surrogate identifier shared by every stored entity.

    24 hexadecimal characters: a 4-byte big-endian creation timestamp
    followed by 8 random bytes, so ids sort roughly by creation time.
    """

    value: str

    @classmethod
    def generate(cls) -> Self:
        """Generate a new identifier.

        Returns:
            New ObjectId.
        """
        timestamp = int(time.time()).to_bytes(4, "big")
        return cls(value=(timestamp + os.urandom(8)).hex())

    @classmethod
    def from_string(cls, value: str, entity_type: str = "resource") -> Self:
        """Create ObjectId from string representation.

        Args:
            value: Hex string representation.
            entity_type: Entity name used in the error message.

        Returns:
            ObjectId instance with a lower-cased value.

        Raises:
            InvalidIdError: If the value is not 24 hex characters.
        """
        if not cls.is_valid(value):
            raise InvalidIdError(entity_type, value)
        return cls(value=value.lower())

    @staticmethod
    def is_valid(value: str | None) -> bool:
        """Check whether a value has the identifier shape."""
        return bool(value) and OBJECT_ID_PATTERN.match(value) is not None

    def __str__(self) -> str:
        return self.value


def new_object_id() -> str:
    """Column default for surrogate identifiers."""
    return str(ObjectId.generate())
