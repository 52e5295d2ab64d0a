"""Configuration data models for tournaments.

This module defines the point system and tournament configuration consumed
by the pairing core.
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

from dataclasses import dataclass, field
from typing import Optional

from swisspairing.constants import (
    BYE_SCORE,
    DEFAULT_SYSTEM,
    DRAW_SCORE,
    FORFEIT_LOSS_SCORE,
    LOSS_SCORE,
    WIN_SCORE,
)
from swisspairing.exceptions import InvalidConfigurationException
from swisspairing.player.history import Color, MatchRecord, MatchResult


@dataclass(frozen=True)
class PointSystem:
    """Points awarded per outcome.

    Attributes:
        win: Points for a win, played or by forfeit
        draw: Points for a draw, also used for half-point absences
        loss: Points for a played loss
        forfeit_loss: Points for a loss by forfeit or a zero-point absence
        pairing_allocated_bye: Points for a bye given by the pairing program
    """

    win: float = WIN_SCORE
    draw: float = DRAW_SCORE
    loss: float = LOSS_SCORE
    forfeit_loss: float = FORFEIT_LOSS_SCORE
    pairing_allocated_bye: float = BYE_SCORE

    def points_for(self, record: MatchRecord) -> float:
        """Return the points a single round's record is worth."""
        if record.is_pairing_allocated_bye:
            return self.pairing_allocated_bye
        if record.result == MatchResult.WIN:
            return self.win
        if record.result == MatchResult.DRAW:
            return self.draw
        if record.game_was_played:
            return self.loss
        return self.forfeit_loss


@dataclass
class TournamentConfig:
    """Configuration settings for a tournament.

    Attributes:
        name: Tournament name
        expected_rounds: Total number of rounds, None if not known yet
        swiss_system: Identifier of the pairing system ('burstein', 'basic')
        point_system: Points awarded per outcome
        initial_color: Color of the odd pairing-numbered, higher-ranked player
            when a pair has no usable color history
        allow_repeat_pairings: Permit repeated pairings as a last resort
    """

    name: str = "Untitled Tournament"
    expected_rounds: Optional[int] = None
    swiss_system: str = DEFAULT_SYSTEM
    point_system: PointSystem = field(default_factory=PointSystem)
    initial_color: Color = Color.WHITE
    allow_repeat_pairings: bool = False

    def __post_init__(self):
        if self.initial_color == Color.NONE:
            raise InvalidConfigurationException("initial_color must be WHITE or BLACK")
        if self.expected_rounds is not None and self.expected_rounds < 1:
            raise InvalidConfigurationException(
                f"Invalid number of rounds: {self.expected_rounds}"
            )
