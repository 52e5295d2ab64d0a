"""Game history records kept for every player.

A player's history is an append-only sequence of ``MatchRecord`` values, one
per round. Pairing code only ever reads it.
"""

# Gambit Pairing
# Copyright (C) 2025  Gambit Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from swisspairing.type_hints import PlayerIndex


class Color(Enum):
    """Piece color. NONE means no color (bye, unplayed game, no preference)."""

    WHITE = "White"
    BLACK = "Black"
    NONE = "None"

    def invert(self) -> "Color":
        """Return the opposite color; NONE stays NONE."""
        if self is Color.WHITE:
            return Color.BLACK
        if self is Color.BLACK:
            return Color.WHITE
        return Color.NONE


class MatchResult(Enum):
    """Outcome of a round from one player's point of view."""

    WIN = "WIN"
    DRAW = "DRAW"
    LOSS = "LOSS"

    def invert(self) -> "MatchResult":
        if self is MatchResult.WIN:
            return MatchResult.LOSS
        if self is MatchResult.LOSS:
            return MatchResult.WIN
        return MatchResult.DRAW


@dataclass(frozen=True)
class MatchRecord:
    """One round of a player's history.

    Attributes:
        opponent: Index of the opponent, None for a bye or an absence
        color: Color played, NONE when no game was played
        result: Result for this player
        game_was_played: False for forfeits, byes and absences
        participated_in_pairing: False when the player asked to sit out
    """

    opponent: Optional[PlayerIndex]
    color: Color
    result: MatchResult
    game_was_played: bool = True
    participated_in_pairing: bool = True

    @property
    def is_pairing_allocated_bye(self) -> bool:
        """Whether this round was a bye handed out by the pairing program."""
        return self.opponent is None and self.participated_in_pairing
