"""Types and helpers shared by every Swiss system.

Pairings, the round matching, the color preference predicates, the result
ordering used for boards and standings, and the checklist table.
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
from typing import Iterable, List, Optional, Sequence, Set, TextIO, Tuple

from swisspairing.constants import (
    CHECKLIST_COLUMN_SEPARATOR,
    RESULT_SYMBOLS,
    UNPLAYED_RESULT_SYMBOLS,
)
from swisspairing.exceptions import InvalidPairingException
from swisspairing.player import Color, MatchRecord, Player, PreferenceStrength
from swisspairing.tournament import Tournament
from swisspairing.type_hints import (
    ChecklistHeaders,
    ChecklistRowFunction,
    PairingIds,
    PlayerIndex,
)


@dataclass(frozen=True)
class Pairing:
    """Two players assigned to play each other, with colors assigned."""

    white: PlayerIndex
    black: PlayerIndex

    def __post_init__(self):
        if self.white == self.black:
            raise InvalidPairingException(
                f"Player {self.white} cannot be paired against itself"
            )

    @classmethod
    def from_color(
        cls, player0: PlayerIndex, player1: PlayerIndex, player0_color: Color
    ) -> "Pairing":
        """Build a pairing from an unordered pair and the color of ``player0``."""
        if player0_color == Color.WHITE:
            return cls(player0, player1)
        return cls(player1, player0)

    @property
    def players(self) -> Tuple[PlayerIndex, PlayerIndex]:
        return self.white, self.black

    def as_ids(self) -> PairingIds:
        return self.white, self.black


@dataclass
class Matching:
    """The pairings of one round plus the bye, if any.

    Attributes:
        pairings: Pairings in board order
        bye: Index of the player receiving the pairing-allocated bye
        relaxations: Rules that had to be relaxed to find the matching
    """

    pairings: List[Pairing] = field(default_factory=list)
    bye: Optional[PlayerIndex] = None
    relaxations: List[str] = field(default_factory=list)

    def paired_players(self) -> Set[PlayerIndex]:
        players: Set[PlayerIndex] = set()
        for pairing in self.pairings:
            players.update(pairing.players)
        return players

    def as_ids(self) -> List[PairingIds]:
        return [p.as_ids() for p in self.pairings]


def color_preferences_are_compatible(preference0: Color, preference1: Color) -> bool:
    """Check whether two players' color preferences can both be honored.

    True unless both demand the same color; NONE is compatible with anything.
    """
    return (
        preference0 != preference1
        or preference0 == Color.NONE
        or preference1 == Color.NONE
    )


def first_color_difference(
    colors0: Sequence[Color], colors1: Sequence[Color]
) -> Tuple[Color, Color]:
    """Compare two played-color sequences from the most recent game backward.

    Returns the colors at the first position where they differ, or
    (NONE, NONE) when the shorter sequence runs out first.
    """
    for color0, color1 in zip(reversed(colors0), reversed(colors1)):
        if color0 != color1:
            return color0, color1
    return Color.NONE, Color.NONE


def find_first_color_difference(
    player0: Player, player1: Player
) -> Tuple[Color, Color]:
    """Find the most recent round in which two players had different colors.

    Only games actually played count; each player's games are aligned from
    the most recent one backward.

    Returns:
        (color of player0, color of player1) at that point, or (NONE, NONE)
    """
    return first_color_difference(player0.played_colors, player1.played_colors)


def _player_key(tournament: Tournament, index: PlayerIndex, accelerated: bool):
    score = (
        tournament.pairing_score(index)
        if accelerated
        else tournament.base_score(index)
    )
    return -score, index


def sort_results(
    pairings: Iterable[Pairing], tournament: Tournament
) -> List[Pairing]:
    """Return pairings in board order.

    Boards are ordered by the higher score of the pair, then the combined
    score, then the better-placed player's key (score, pairing number).
    """

    def board_key(pairing: Pairing):
        white_key = _player_key(tournament, pairing.white, True)
        black_key = _player_key(tournament, pairing.black, True)
        higher = min(white_key, black_key)
        return higher[0], white_key[0] + black_key[0], higher

    return sorted(pairings, key=board_key)


def rank_players(
    tournament: Tournament,
    players: Optional[Iterable[PlayerIndex]] = None,
    accelerated: bool = False,
) -> List[PlayerIndex]:
    """Rank players by score (descending) then pairing number.

    Args:
        tournament: The tournament
        players: Indices to rank, all players by default
        accelerated: Rank by pairing score (with acceleration) instead of base score
    """
    indices = range(len(tournament.players)) if players is None else players
    return sorted(indices, key=lambda i: _player_key(tournament, i, accelerated))


def print_checklist(
    stream: TextIO,
    headers: ChecklistHeaders,
    row_function: ChecklistRowFunction,
    tournament: Tournament,
    ranking: Iterable[PlayerIndex],
) -> None:
    """Write a right-aligned text table with one row per ranked player.

    Args:
        stream: Output sink
        headers: Column headers
        row_function: Maps a Player to its column values
        tournament: The tournament the ranking refers to
        ranking: Player indices in the order they are printed
    """
    rows = [list(headers)]
    for index in ranking:
        row = [str(value) for value in row_function(tournament.player(index))]
        if len(row) != len(headers):
            raise ValueError(
                f"Checklist row has {len(row)} values for {len(headers)} columns"
            )
        rows.append(row)

    widths = [max(len(row[col]) for row in rows) for col in range(len(headers))]
    for row in rows:
        cells = [value.rjust(width) for value, width in zip(row, widths)]
        stream.write(CHECKLIST_COLUMN_SEPARATOR.join(cells).rstrip() + "\n")
    stream.write("\n")


def format_record(record: MatchRecord) -> str:
    """Short checklist form of one round, e.g. ``12W1``, ``5B-`` or ``--+``.

    Opponents are shown by pairing number, unplayed results with the
    forfeit symbols.
    """
    symbols = RESULT_SYMBOLS if record.game_was_played else UNPLAYED_RESULT_SYMBOLS
    result = symbols[record.result.value]
    if record.opponent is None:
        return f"--{result}"
    return f"{record.opponent + 1}{record.color.value[0]}{result}"


def format_history(player: Player) -> str:
    return " ".join(format_record(m) for m in player.matches)


def format_due_color(player: Player) -> str:
    """Due color as ``w`` (mild), ``W`` (strong), ``W!`` (absolute) or ``-``."""
    preference = player.color_preference()
    if preference.color == Color.NONE:
        return "-"
    initial = preference.color.value[0]
    if preference.strength == PreferenceStrength.MILD:
        return initial.lower()
    if preference.strength == PreferenceStrength.ABSOLUTE:
        return initial + "!"
    return initial
