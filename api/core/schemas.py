"""
Shared pydantic base for request/response models.

The HTTP contract uses camelCase field names; Python code uses snake_case.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def strip_or_none(value: object) -> object:
    """
    Trim strings and turn blank strings into None (for optional text fields).
    """
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value
