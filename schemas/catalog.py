"""Catalog entry schemas."""

from pydantic import BaseModel, ConfigDict, Field


class Pricing(BaseModel):
    """Pricing summary for a tool."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    free: bool = False
    starting_price: str = Field("", alias="startingPrice")
    plans: tuple[str, ...] = ()


class CatalogEntry(BaseModel):
    """A single recommendable AI tool.

    Attribute names are snake_case; the JSON catalog and the payloads sent
    back to the agent use the camelCase aliases.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    company: str = ""
    url: str = ""
    category: str = ""
    description: str = ""
    key_features: tuple[str, ...] = Field((), alias="keyFeatures")
    pricing: Pricing = Field(default_factory=Pricing)
    best_for: tuple[str, ...] = Field((), alias="bestFor")
    last_updated: str = Field("", alias="lastUpdated")

    def to_payload(self) -> dict:
        """Serialize with catalog (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


class CategoryCount(BaseModel):
    """Number of catalog entries in one category."""
    name: str
    count: int
