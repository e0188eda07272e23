"""Shared pydantic configuration for request and response schemas."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchemaModel(BaseModel):
    """Base model for every schema exchanged over the API.

    Fields are declared in snake_case and travel as camelCase. Both spellings
    are accepted on input, enums are stored as their values and ORM rows can
    be validated directly with `model_validate(instance)`.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
        str_strip_whitespace=True,
    )
