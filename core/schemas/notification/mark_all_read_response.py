"""Schema for the read-all response."""

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class MarkAllReadResponse(BaseSchemaModel):
    """Number of rows flipped to read."""

    updated: int = Field(..., ge=0)
