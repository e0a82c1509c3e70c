"""
Shared base for API I/O models.

Request and response bodies use camelCase on the wire (``isLike``,
``profileImage``) while Python code keeps snake_case attributes. Both spellings
are accepted on input.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base schema for request/response bodies."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    """Plain confirmation message."""

    message: str
