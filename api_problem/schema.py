"""Pydantic model for the Problem schema."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Problem(BaseModel):
    """Model of the RFC7807 Problem members.

    Parsed payloads are validated through this model so that the well-known
    members are coerced to their expected types (e.g. a status of "403" read
    from XML becomes 403). Any other member is kept untouched in `model_extra`.
    """

    model_config = ConfigDict(extra='allow', coerce_numbers_to_str=True)

    type: str = 'about:blank'
    title: Optional[str] = None
    status: Optional[int] = None
    detail: Optional[str] = None
    instance: Optional[str] = None

    @field_validator('type', mode='before')
    @classmethod
    def default_type(cls, value: Any) -> Any:
        return value or 'about:blank'
