import datetime

from pydantic import BaseModel, Field

from app.core.enums import CardRarity, PackTier
from app.schemas.shop import AwardedCard


class InventoryCard(BaseModel):
    inventory_id: int
    card_id: int
    name: str
    rarity: CardRarity
    attack: int
    defense: int
    quantity: int
    acquired_at: datetime.datetime


class UnopenedPackResponse(BaseModel):
    tier: PackTier
    quantity: int


class OpenPackRequest(BaseModel):
    tier: PackTier


class OpenPackResponse(BaseModel):
    cards: list[AwardedCard]
    luck_multiplier: float
    remaining: int


class CardInstance(BaseModel):
    """One physical copy of a card: the inventory row plus the copy's index."""

    inventory_id: int
    instance_index: int = Field(ge=0)


class AppraisedCard(CardInstance):
    card_id: int
    name: str
    rarity: CardRarity
    sell_price: int


class SellCardsRequest(BaseModel):
    instances: list[CardInstance] = Field(min_length=1)


class SellCardsResponse(BaseModel):
    quantity_sold: int
    total_value: int
    new_currency_balance: int
