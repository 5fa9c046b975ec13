"""Shared schema configuration."""
from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelResponse(BaseModel):
    """Response model read from ORM objects and rendered with camelCase keys."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CamelRequest(BaseModel):
    """Request body accepting camelCase keys (snake_case also works)."""
    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=to_camel),
        populate_by_name=True,
    )
