from bson import ObjectId
from beanie import PydanticObjectId

from ..errors import InvalidInputError


def parse_object_id(value: str, label: str = "id") -> PydanticObjectId:
    """Turn a hex string into an ObjectId or fail with `invalid <label> value`."""
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidInputError(f"invalid {label} value")
    return PydanticObjectId(value)
