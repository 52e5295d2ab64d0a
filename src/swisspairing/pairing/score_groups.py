"""Score-group partitioning.

Active players are frozen into ``PlayerState`` snapshots, ranked, and split
into score groups in strictly descending score order.
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
from typing import Callable, FrozenSet, List, Sequence, Tuple

from swisspairing.player import Color, ColorPreference
from swisspairing.tournament import Tournament
from swisspairing.type_hints import PlayerIndex

RankKey = Callable[[PlayerIndex], tuple]


@dataclass(frozen=True)
class PlayerState:
    """Immutable view of a player taken when pairing starts.

    Attributes:
        index: Player index in the tournament
        score: Pairing score (base score plus acceleration)
        rank: Position in the round's ranking, 0 is the highest ranked
        preference: Due color and its strength
        played_colors: Colors of played games, oldest first
        opponents: Players already met in a played game
        byes: Pairing-allocated byes received so far
        topscorer: Exempt from absolute color rules in the final round
    """

    index: PlayerIndex
    score: float
    rank: int
    preference: ColorPreference
    played_colors: Tuple[Color, ...]
    opponents: FrozenSet[PlayerIndex]
    byes: int
    topscorer: bool = False

    @property
    def pairing_number(self) -> int:
        return self.index + 1

    @property
    def due_color(self) -> Color:
        return self.preference.color

    @property
    def absolute_color(self) -> Color:
        return self.preference.absolute_color


@dataclass(frozen=True)
class ScoreGroup:
    """Players sharing the same pairing score, in rank order."""

    score: float
    players: Tuple[PlayerState, ...]

    def __len__(self) -> int:
        return len(self.players)


def build_player_states(tournament: Tournament, rank_key: RankKey) -> List[PlayerState]:
    """Snapshot and rank all active players.

    Players are ordered by pairing score (descending), then by the
    system's rank key.
    """
    scores = {i: tournament.pairing_score(i) for i in tournament.active_indices()}
    ordered = sorted(scores, key=lambda i: (-scores[i], rank_key(i)))

    states = []
    for rank, index in enumerate(ordered):
        player = tournament.player(index)
        states.append(
            PlayerState(
                index=index,
                score=scores[index],
                rank=rank,
                preference=player.color_preference(),
                played_colors=tuple(player.played_colors),
                opponents=frozenset(player.played_opponents),
                byes=player.bye_count,
                topscorer=tournament.is_topscorer(index),
            )
        )
    return states


def partition_score_groups(players: Sequence[PlayerState]) -> List[ScoreGroup]:
    """Split ranked players into score groups, highest score first.

    Args:
        players: Players already sorted by score descending

    Returns:
        Score groups with strictly descending scores
    """
    groups: List[ScoreGroup] = []
    current: List[PlayerState] = []
    for state in players:
        if current and state.score != current[0].score:
            groups.append(ScoreGroup(current[0].score, tuple(current)))
            current = []
        current.append(state)
    if current:
        groups.append(ScoreGroup(current[0].score, tuple(current)))

    for higher, lower in zip(groups, groups[1:]):
        if not higher.score > lower.score:
            raise ValueError("Players must be sorted by descending score")
    return groups


def order_bye_candidates(players: Sequence[PlayerState]) -> List[PlayerState]:
    """Order players by bye priority.

    Fewest byes received first, then lowest score, then lowest ranked.
    """
    return sorted(players, key=lambda p: (p.byes, p.score, -p.rank))
