from pydantic import BaseModel, ConfigDict

from tareas_api.naming import snake_to_camel


class WireModel(BaseModel):
    """Base for payloads exchanged with the mobile app.

    Field names follow the database columns; aliases are their camelCase
    form. Input is accepted under either name, output uses the alias.
    """

    model_config = ConfigDict(
        alias_generator=snake_to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
