"""The tournament aggregate consumed by the pairing core.

A ``Tournament`` owns the players and the configuration. Player identity
throughout the pairing code is the player's index in ``Tournament.players``.
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

from typing import Iterable, List, Optional, Set

from swisspairing.exceptions import InvalidResultException, PlayerNotFoundException
from swisspairing.player import Color, MatchRecord, MatchResult, Player
from swisspairing.tournament.models import TournamentConfig
from swisspairing.type_hints import PlayerIndex
from swisspairing.utils import setup_logger

logger = setup_logger(__name__)


class Tournament:
    """All players of a tournament plus its configuration.

    Attributes:
        config: Tournament configuration
        players: Players in pairing-number order (index 0 is pairing number 1)
        forbidden_pairs: Pairs that must never be paired together
    """

    def __init__(
        self,
        config: Optional[TournamentConfig] = None,
        players: Optional[Iterable[Player]] = None,
    ) -> None:
        self.config: TournamentConfig = config or TournamentConfig()
        self.players: List[Player] = list(players) if players else []
        self.forbidden_pairs: Set[frozenset] = set()

    # --- Roster ---

    def add_player(self, name: str, rating: Optional[int] = None) -> PlayerIndex:
        """Add a player and return its index."""
        self.players.append(Player(name=name, rating=rating))
        return len(self.players) - 1

    def player(self, index: PlayerIndex) -> Player:
        """Return the player with the given index.

        Raises:
            PlayerNotFoundException: If the index does not name a player
        """
        if not isinstance(index, int) or not 0 <= index < len(self.players):
            logger.error("Referenced player index %s is not in the tournament", index)
            raise PlayerNotFoundException(f"No player with index {index}")
        return self.players[index]

    def active_indices(self) -> List[PlayerIndex]:
        return [i for i, p in enumerate(self.players) if p.is_active]

    def withdraw(self, index: PlayerIndex) -> None:
        """Exclude a player from all further pairings."""
        self.player(index).is_active = False
        logger.info("Player %s withdrew", self.players[index].name)

    def forbid_pair(self, first: PlayerIndex, second: PlayerIndex) -> None:
        """Never pair these two players together."""
        self.player(first)
        self.player(second)
        self.forbidden_pairs.add(frozenset({first, second}))

    def is_forbidden(self, first: PlayerIndex, second: PlayerIndex) -> bool:
        return frozenset({first, second}) in self.forbidden_pairs

    def have_met(self, first: PlayerIndex, second: PlayerIndex) -> bool:
        """Check if two players have previously played a game against each other."""
        return self.player(first).has_played(second)

    # --- Rounds ---

    @property
    def played_rounds(self) -> int:
        """Number of rounds with recorded results."""
        return max((len(p.matches) for p in self.players), default=0)

    @property
    def next_round(self) -> int:
        """The 1-based number of the round about to be paired."""
        return self.played_rounds + 1

    @property
    def is_final_round(self) -> bool:
        expected = self.config.expected_rounds
        return expected is not None and self.next_round >= expected

    # --- Scores ---

    def base_score(self, index: PlayerIndex) -> float:
        """Score from recorded results only."""
        points = self.config.point_system
        return sum(points.points_for(m) for m in self.player(index).matches)

    def pairing_score(self, index: PlayerIndex) -> float:
        """Score used to build score groups: base score plus acceleration."""
        return self.base_score(index) + self.player(index).acceleration_for(
            self.next_round
        )

    def is_topscorer(self, index: PlayerIndex) -> bool:
        """Whether a player has over half the maximum score in the final round."""
        if not self.is_final_round:
            return False
        max_possible = self.config.point_system.win * self.played_rounds
        return self.base_score(index) > max_possible / 2

    # --- Result recording ---

    def record_game(
        self,
        white: PlayerIndex,
        black: PlayerIndex,
        white_result: MatchResult,
        game_was_played: bool = True,
    ) -> None:
        """Record a game between two players (a forfeit when not played)."""
        if white == black:
            raise InvalidResultException("A player cannot play against itself")
        white_player = self.player(white)
        black_player = self.player(black)
        white_player.add_record(
            MatchRecord(black, Color.WHITE, white_result, game_was_played)
        )
        black_player.add_record(
            MatchRecord(white, Color.BLACK, white_result.invert(), game_was_played)
        )
        logger.debug(
            "Recorded %s - %s: %s%s",
            white_player.name,
            black_player.name,
            white_result.value,
            "" if game_was_played else " (unplayed)",
        )

    def record_bye(self, index: PlayerIndex) -> None:
        """Record a pairing-allocated bye."""
        self.player(index).add_record(
            MatchRecord(None, Color.NONE, MatchResult.WIN, game_was_played=False)
        )

    def record_absence(
        self, index: PlayerIndex, result: MatchResult = MatchResult.LOSS
    ) -> None:
        """Record a round the player sat out (zero- or half-point bye)."""
        self.player(index).add_record(
            MatchRecord(
                None,
                Color.NONE,
                result,
                game_was_played=False,
                participated_in_pairing=False,
            )
        )
