"""
Base model for records stored in the document tree.

Stored records use camelCase keys (carName, imageSrc, createdAt); Python code
uses snake_case attributes. Aliases bridge the two, and API responses are
serialized by alias so clients see the same keys the tree holds.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self, exclude: Optional[set[str]] = None) -> dict[str, Any]:
        """Dict in tree shape: camelCase keys, unset optionals dropped."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude, mode="json")


def as_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """
    Lenient integer coercion for values written by old forms.

    Accepts ints, floats and numeric strings ("1200000", "12,00,000",
    " 2024 "). Anything else yields the default.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return default
    if isinstance(value, (float, str)):
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            return default
    return default
