from enum import StrEnum


class CardRarity(StrEnum):
    """Card rarity tiers, declared from lowest to highest."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"
    MYTHICAL = "mythical"
    DIVINE = "divine"
    PRISMATIC = "prismatic"
    TRANSCENDENT = "transcendent"
    SECRET = "secret"
    """Holographic tier"""
    EXCLUSIVE = "exclusive"
    """Admin-granted only, never dropped by packs or NPCs"""

    @property
    def tier(self) -> int:
        return list(CardRarity).index(self)


class PackTier(StrEnum):
    SMALL = "small"
    NORMAL = "normal"
    BIG = "big"
    PREMIUM = "premium"
    DELUXE = "deluxe"


class LuckBoostType(StrEnum):
    LUCKY_CHARM = "lucky_charm"
    FORTUNE_COOKIE = "fortune_cookie"
    GOLDEN_HORSESHOE = "golden_horseshoe"


class BattleSide(StrEnum):
    A = "a"
    B = "b"

    @property
    def opponent(self) -> "BattleSide":
        return BattleSide.B if self is BattleSide.A else BattleSide.A


class BattleStatus(StrEnum):
    PENDING = "pending"
    RESOLVED = "resolved"


class PvPStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class EventType(StrEnum):
    PACK_PURCHASE = "pack_purchase"
    PACK_OPEN = "pack_open"
    LUCK_BOOST_PURCHASE = "luck_boost_purchase"
    CARD_SELL = "card_sell"
    BATTLE_REWARD = "battle_reward"
    BATTLE_LOSS = "battle_loss"
    PVP_BATTLE = "pvp_battle"
    QUEST_PROGRESS = "quest_progress"


class QuestType(StrEnum):
    WIN_BATTLE = "win_battle"
    OPEN_PACK = "open_pack"
    SELL_CARDS = "sell_cards"
    PVP_BATTLE = "pvp_battle"


class CardSortField(StrEnum):
    ID = "id"
    NAME = "name"
    RARITY = "rarity"
    ATTACK = "attack"
    DEFENSE = "defense"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"
