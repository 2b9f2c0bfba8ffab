from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Document(BaseModel):
    """Base for models persisted as MongoDB documents."""

    collection_name: ClassVar[str]

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True, extra="allow")
