import datetime

from pydantic import BaseModel, ConfigDict

from app.core.enums import CardRarity, LuckBoostType, PackTier


class PackResponse(BaseModel):
    tier: PackTier
    name: str
    description: str
    cost: int
    card_count: int
    weights: dict[CardRarity, float]


class LuckBoostResponse(BaseModel):
    type: LuckBoostType
    name: str
    description: str
    cost: int
    multiplier: float
    duration_minutes: int


class ActiveLuckBoostResponse(BaseModel):
    type: LuckBoostType
    multiplier: float
    expires_at: datetime.datetime


class AwardedCard(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    rarity: CardRarity
    attack: int
    defense: int


class PurchasePackRequest(BaseModel):
    tier: PackTier
    auto_open: bool = True


class PurchasePackResponse(BaseModel):
    saved_to_inventory: bool
    cards: list[AwardedCard]
    luck_multiplier: float
    new_balance: int


class PurchaseLuckBoostRequest(BaseModel):
    type: LuckBoostType


class PurchaseLuckBoostResponse(BaseModel):
    new_balance: int
    expires_at: datetime.datetime
