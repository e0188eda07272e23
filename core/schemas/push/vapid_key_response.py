"""Schema for the VAPID public key response."""

from core.schemas.base_schema_model import BaseSchemaModel


class VapidKeyResponse(BaseSchemaModel):
    """Application server key the browser subscribes with."""

    public_key: str
