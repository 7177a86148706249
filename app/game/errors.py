class GameError(Exception):
    """Base class for errors raised by the game core."""


class DeckValidationError(GameError):
    """A deck handed to the core is malformed (size, positions, unknown cards)."""


class BattleInvariantError(GameError):
    """The battle state machine reached a state that well-formed decks cannot produce."""
