"""A chess player in a Swiss tournament."""

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

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Set

from swisspairing.player.history import Color, MatchRecord
from swisspairing.type_hints import PlayerIndex
from swisspairing.utils import setup_logger

logger = setup_logger(__name__)


class PreferenceStrength(IntEnum):
    """Strength of a color preference, ordered weakest to strongest."""

    NONE = 0
    MILD = 1
    STRONG = 2
    ABSOLUTE = 3


@dataclass(frozen=True)
class ColorPreference:
    """A player's due color together with how strongly it is due.

    Attributes:
        color: The due color, NONE if nothing is due yet
        strength: How strongly the color is due
        imbalance: Whites minus blacks over played games
    """

    color: Color
    strength: PreferenceStrength
    imbalance: int = 0

    @property
    def absolute_color(self) -> Color:
        """The due color if it is absolute, otherwise NONE."""
        if self.strength == PreferenceStrength.ABSOLUTE:
            return self.color
        return Color.NONE


NO_PREFERENCE = ColorPreference(Color.NONE, PreferenceStrength.NONE, 0)


class Player:
    """Represents a player in the tournament.

    The pairing core never mutates a player's history; results are appended
    by the caller through the ``Tournament`` recording helpers. The only
    field the core writes is ``accelerations``.

    Attributes:
        name: Player's full name
        rating: Player's rating
        is_active: Whether the player takes part in the next pairing
        matches: One MatchRecord per round played so far
        accelerations: Virtual points per round, round r at position r - 1
    """

    def __init__(
        self,
        name: str,
        rating: Optional[int] = None,
        is_active: bool = True,
    ) -> None:
        self.name: str = name
        self.rating: int = rating if rating is not None else 0
        self.is_active: bool = is_active
        self.matches: List[MatchRecord] = []
        self.accelerations: List[float] = []

    def add_record(self, record: MatchRecord) -> None:
        """Append the outcome of a round to this player's history."""
        self.matches.append(record)

    @property
    def played_colors(self) -> List[Color]:
        """Colors of the games actually played, oldest first."""
        return [m.color for m in self.matches if m.game_was_played]

    @property
    def color_imbalance(self) -> int:
        """Whites minus blacks over played games."""
        colors = self.played_colors
        return colors.count(Color.WHITE) - colors.count(Color.BLACK)

    @property
    def bye_count(self) -> int:
        """Number of pairing-allocated byes received."""
        return sum(1 for m in self.matches if m.is_pairing_allocated_bye)

    @property
    def played_opponents(self) -> Set[PlayerIndex]:
        """Indices of opponents this player actually played a game against."""
        return {
            m.opponent
            for m in self.matches
            if m.game_was_played and m.opponent is not None
        }

    def has_played(self, opponent: PlayerIndex) -> bool:
        return opponent in self.played_opponents

    def color_preference(self) -> ColorPreference:
        """Determine the due color and its strength from played games.

        Rules:
        1. Absolute: imbalance beyond one, or the last two games had the same color
        2. Strong: imbalance of exactly one, prefer the under-played color
        3. Mild: balanced, prefer to alternate from the last game
        4. None: no games played yet

        Returns:
            The player's ColorPreference
        """
        colors = self.played_colors
        if not colors:
            return NO_PREFERENCE

        imbalance = colors.count(Color.WHITE) - colors.count(Color.BLACK)

        if imbalance > 1:
            return ColorPreference(Color.BLACK, PreferenceStrength.ABSOLUTE, imbalance)
        if imbalance < -1:
            return ColorPreference(Color.WHITE, PreferenceStrength.ABSOLUTE, imbalance)
        if len(colors) >= 2 and colors[-1] == colors[-2]:
            return ColorPreference(
                colors[-1].invert(), PreferenceStrength.ABSOLUTE, imbalance
            )
        if imbalance == 1:
            return ColorPreference(Color.BLACK, PreferenceStrength.STRONG, imbalance)
        if imbalance == -1:
            return ColorPreference(Color.WHITE, PreferenceStrength.STRONG, imbalance)
        return ColorPreference(colors[-1].invert(), PreferenceStrength.MILD, imbalance)

    @property
    def due_color(self) -> Color:
        return self.color_preference().color

    def acceleration_for(self, round_number: int) -> float:
        """Virtual points applied when pairing the given (1-based) round."""
        if 1 <= round_number <= len(self.accelerations):
            return self.accelerations[round_number - 1]
        return 0.0

    def set_acceleration(self, round_number: int, points: float) -> None:
        """Store the virtual points used when pairing the given round."""
        if round_number < 1:
            raise ValueError(f"Invalid round number: {round_number}")
        while len(self.accelerations) < round_number:
            self.accelerations.append(0.0)
        self.accelerations[round_number - 1] = points
        logger.debug(
            "Acceleration for %s in round %s set to %s", self.name, round_number, points
        )

    def __repr__(self) -> str:
        return f"Player(name='{self.name}', rating={self.rating})"

    def __str__(self) -> str:
        return f"{self.name} ({self.rating})"
