from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    db_url: str
    env: Literal["prod", "dev"] = "prod"
    host: str = "127.0.0.1"
    port: int = 3011
    cors_origins: list[str] = ["*"]

    # JWT issued by the external identity provider
    # IMPORTANT: set in environment for production
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"

    # Battle economy
    battle_entry_cost: int = 15
    battle_min_cards: int = 3
    reward_min: int = 30
    reward_max: int = 50
    base_pack_chance: float = 0.15
    pack_chance_per_win: float = 0.02
    max_pack_chance: float = 0.50

    # PvP requests
    pvp_request_expiry_seconds: int = 30
    pvp_deck_window_seconds: int = 300

    @property
    def is_dev(self) -> bool:
        return self.env == "dev"


load_dotenv()
settings = Config()  # pyright: ignore[reportCallIssue]
