from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose JSON form uses camelCase keys.

    Python code constructs and reads these models with snake_case names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
