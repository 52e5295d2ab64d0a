"""Tiebreak calculation for tournaments.

This module computes the tiebreaks the Burstein system uses to rank players
within a score group once the seeding rounds are over.
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

from typing import Dict, List

from swisspairing.constants import (
    TB_BUCHHOLZ,
    TB_BUCHHOLZ_MEDIAN,
    TB_PROGRESSIVE,
    TB_SONNEBORN_BERGER,
)
from swisspairing.player import MatchResult
from swisspairing.tournament.tournament import Tournament
from swisspairing.type_hints import PlayerIndex


class TiebreakCalculator:
    """Calculates tiebreak scores from a tournament's recorded results.

    Opponent scores are base scores (accelerations never count), and only
    games actually played contribute:

    - Buchholz: Sum of opponents' scores
    - Buchholz Median: Buchholz dropping the highest and lowest opponent score
    - Sonneborn-Berger: Sum of (opponent score x result against them)
    - Progressive: Sum of the running score after each round
    """

    def __init__(self, tournament: Tournament) -> None:
        self.tournament = tournament
        self._scores: Dict[PlayerIndex, float] = {
            i: tournament.base_score(i) for i in range(len(tournament.players))
        }

    def calculate_all_tiebreaks(self) -> Dict[PlayerIndex, Dict[str, float]]:
        """Calculate all tiebreaks for all players.

        Returns:
            Dictionary of player index -> tiebreak key -> value
        """
        return {
            i: self.calculate_player_tiebreaks(i)
            for i in range(len(self.tournament.players))
        }

    def calculate_player_tiebreaks(self, index: PlayerIndex) -> Dict[str, float]:
        """Calculate all tiebreak scores for a single player.

        Args:
            index: The player to calculate tiebreaks for
        """
        player = self.tournament.player(index)
        opponent_scores: List[float] = []
        sb_score = 0.0

        for match in player.matches:
            if not match.game_was_played or match.opponent is None:
                continue
            opp_score = self._scores[match.opponent]
            opponent_scores.append(opp_score)
            if match.result == MatchResult.WIN:
                sb_score += opp_score
            elif match.result == MatchResult.DRAW:
                sb_score += 0.5 * opp_score

        return {
            TB_BUCHHOLZ: sum(opponent_scores),
            TB_BUCHHOLZ_MEDIAN: self._calculate_buchholz_median(opponent_scores),
            TB_SONNEBORN_BERGER: sb_score,
            TB_PROGRESSIVE: self._calculate_progressive(index),
        }

    def _calculate_buchholz_median(self, opponent_scores: List[float]) -> float:
        """Drop both the highest and lowest opponent scores.

        With fewer than three opponents nothing is dropped.
        """
        if len(opponent_scores) <= 2:
            return sum(opponent_scores)
        sorted_scores = sorted(opponent_scores)
        return sum(sorted_scores[1:-1])

    def _calculate_progressive(self, index: PlayerIndex) -> float:
        points = self.tournament.config.point_system
        running = 0.0
        total = 0.0
        for match in self.tournament.player(index).matches:
            running += points.points_for(match)
            total += running
        return total
