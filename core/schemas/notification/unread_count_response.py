"""Schema for the unread count response."""

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class UnreadCountResponse(BaseSchemaModel):
    """Unread notifications of the authenticated owner."""

    count: int = Field(..., ge=0)
