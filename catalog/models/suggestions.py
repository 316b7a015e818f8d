"""Structured output of the AI prefill collaborator."""

from typing import Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog.models.base import ApiModel
from catalog.models.embeddings import UpsertOutcome
from catalog.models.items import ItemOut


class ItemSuggestion(BaseModel):
    """Candidate listing fields proposed from the item's photos.

    The agent fills the snake_case names; responses carry them in camelCase.
    """

    name: str = Field(..., max_length=255, description="Short listing title")
    description: str = Field(..., description="Listing description, plain text")
    unit_price_cents: int = Field(..., ge=0, description="Suggested price in cents")

    model_config = ConfigDict(alias_generator=AliasGenerator(serialization_alias=to_camel))


class PrefillResult(ApiModel):
    item: ItemOut
    suggestion: ItemSuggestion
    embedding: Optional[UpsertOutcome] = None
    embedding_skipped: bool = False
