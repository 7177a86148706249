import sqlmodel

from app.core.enums import CardRarity
from app.game.catalog import CardDefinition

from ._base import BaseModel


class Card(BaseModel, table=True):
    __tablename__: str = "cards"

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    name: str = sqlmodel.Field(max_length=100, index=True, unique=True)
    description: str = ""
    image_url: str | None = sqlmodel.Field(default=None, nullable=True)
    rarity: CardRarity = sqlmodel.Field(index=True)

    attack: int = sqlmodel.Field(ge=0)
    defense: int = sqlmodel.Field(ge=0)
    cost: int = sqlmodel.Field(default=0, ge=0)
    """Unused by battle logic"""

    def to_definition(self) -> CardDefinition:
        return CardDefinition(
            id=self.id,
            name=self.name,
            rarity=self.rarity,
            attack=self.attack,
            defense=self.defense,
            cost=self.cost,
        )

    def __str__(self) -> str:
        return f"{self.name} (#{self.id})"
