"""Mutation engine configuration."""

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Settings for the list the engine operates on and its request policy."""

    container_url: str = Field(
        default="",
        description="URL of the list that validation requests target",
    )
    list_id: str = Field(default="", description="List identifier sent with deletes")
    identity_field: str = Field(
        default="ID",
        description="Field holding the item identity; excluded from create payloads",
    )
    new_identity_field: str = Field(
        default="Id",
        description="Outcome field name carrying the identity assigned on create",
    )
    new_row_key_prefix: str = Field(
        default="addnewrow",
        description="Temporary key prefix marking an inline blank row",
    )
    serialize_per_item: bool = Field(
        default=True,
        description="Serialize remote requests per item key",
    )
