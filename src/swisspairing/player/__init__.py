from swisspairing.player.base_player import (
    NO_PREFERENCE,
    ColorPreference,
    Player,
    PreferenceStrength,
)
from swisspairing.player.history import Color, MatchRecord, MatchResult

__all__ = [
    "Player",
    "ColorPreference",
    "PreferenceStrength",
    "NO_PREFERENCE",
    "Color",
    "MatchRecord",
    "MatchResult",
]
