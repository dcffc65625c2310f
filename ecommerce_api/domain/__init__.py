"""Domain layer.

Error taxonomy and identifier value objects shared by all modules.
"""

from ecommerce_api.domain.exceptions import (
    PARAMETER_MESSAGES,
    CatalogError,
    DuplicateKeyError,
    EntityValidationError,
    InvalidIdError,
    InvalidParameterError,
    NotFoundError,
)
from ecommerce_api.domain.value_objects import ObjectId, new_object_id

__all__ = [
    "PARAMETER_MESSAGES",
    "CatalogError",
    "DuplicateKeyError",
    "EntityValidationError",
    "InvalidIdError",
    "InvalidParameterError",
    "NotFoundError",
    "ObjectId",
    "new_object_id",
]
