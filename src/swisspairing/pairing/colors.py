"""Color allocation for a pair of players already decided to meet."""

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

from swisspairing.pairing.common import Pairing, first_color_difference
from swisspairing.pairing.score_groups import PlayerState
from swisspairing.player import Color


def _preference_strength(player: PlayerState) -> tuple:
    return player.preference.strength, abs(player.preference.imbalance)


def allocate_colors(
    first: PlayerState, second: PlayerState, initial_color: Color
) -> Pairing:
    """Decide who plays white, in descending priority:

    1. A player with a due color gets it when the opponent has none
    2. Opposite due colors are both granted
    3. Equal due colors: the stronger preference wins (strength, then
       color imbalance)
    4. Alternate the colors of the most recent round in which the two
       players had different colors
    5. The higher ranked player's due color wins
    6. No usable history: the higher ranked player gets ``initial_color``
       with an odd pairing number, the other color with an even one

    Returns:
        The pairing with colors assigned
    """
    color0 = first.due_color
    color1 = second.due_color
    if first.rank < second.rank:
        higher, lower = first, second
    else:
        higher, lower = second, first

    if color0 != Color.NONE and color1 == Color.NONE:
        return Pairing.from_color(first.index, second.index, color0)
    if color1 != Color.NONE and color0 == Color.NONE:
        return Pairing.from_color(second.index, first.index, color1)

    if color0 != Color.NONE and color0 != color1:
        return Pairing.from_color(first.index, second.index, color0)

    if color0 != Color.NONE:
        strength0 = _preference_strength(first)
        strength1 = _preference_strength(second)
        if strength0 > strength1:
            return Pairing.from_color(first.index, second.index, color0)
        if strength1 > strength0:
            return Pairing.from_color(second.index, first.index, color1)

    history0, _ = first_color_difference(first.played_colors, second.played_colors)
    if history0 != Color.NONE:
        return Pairing.from_color(first.index, second.index, history0.invert())

    if higher.due_color != Color.NONE:
        return Pairing.from_color(higher.index, lower.index, higher.due_color)

    if higher.pairing_number % 2 == 1:
        return Pairing.from_color(higher.index, lower.index, initial_color)
    return Pairing.from_color(higher.index, lower.index, initial_color.invert())
