from pydantic import BaseModel, Field

from app.core.enums import CardRarity, CardSortField, SortOrder


class CardListParams(BaseModel):
    """Query parameters for listing cards."""

    search_name: str | None = None
    rarity: CardRarity | None = None
    sort_by: CardSortField = CardSortField.ID
    sort_order: SortOrder = SortOrder.ASC


class CardCreate(BaseModel):
    name: str = Field(max_length=100)
    description: str = ""
    image_url: str | None = None
    rarity: CardRarity
    attack: int = Field(ge=0)
    defense: int = Field(ge=0)
    cost: int = Field(default=0, ge=0)


class CardUpdate(BaseModel):
    """Administrative stat correction."""

    name: str | None = None
    description: str | None = None
    image_url: str | None = None
    rarity: CardRarity | None = None
    attack: int | None = Field(default=None, ge=0)
    defense: int | None = Field(default=None, ge=0)
    cost: int | None = Field(default=None, ge=0)


class SeedCardsResponse(BaseModel):
    seeded: bool
    count: int
