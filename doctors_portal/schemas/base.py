from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Serializes as camelCase and accepts either camelCase or snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class UpdateResult(CamelModel):
    matched_count: int
    modified_count: int
    upserted_id: Optional[int] = None

class DeleteResult(CamelModel):
    deleted_count: int

class InsertResult(CamelModel):
    acknowledged: bool = True
    inserted_id: int
