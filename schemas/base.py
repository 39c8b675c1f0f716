# schemas/base.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the upstream wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_upstream(self, **kwargs) -> dict:
        return self.model_dump(by_alias=True, **kwargs)
