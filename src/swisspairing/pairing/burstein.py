"""Burstein Swiss system.

Players within a score group are ranked by pairing number during the
seeding rounds and by the Burstein index afterwards. The default
acceleration is the Baku method.
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

import math
from typing import List, Optional, TextIO

from swisspairing.constants import (
    ACCELERATION_GROUP_DIVISOR,
    BURSTEIN_INDEX_ORDER,
    SYSTEM_BURSTEIN,
    TIEBREAK_NAMES,
)
from swisspairing.exceptions import InvalidConfigurationException
from swisspairing.pairing.common import (
    Matching,
    format_due_color,
    format_history,
    print_checklist,
)
from swisspairing.pairing.matching import compute_matching
from swisspairing.pairing.score_groups import RankKey
from swisspairing.player import Player
from swisspairing.tournament import TiebreakCalculator, Tournament
from swisspairing.type_hints import ChecklistRowFunction, PlayerIndex
from swisspairing.utils import setup_logger

logger = setup_logger(__name__)


def seeding_rounds(tournament: Tournament) -> int:
    """Rounds in which players are ranked by pairing number only.

    The first half of the tournament, or just the first round when the
    number of rounds is not known.
    """
    expected = tournament.config.expected_rounds
    if expected is None:
        return 1
    return max(1, expected // 2)


def is_seeding_round(tournament: Tournament) -> bool:
    return tournament.next_round <= seeding_rounds(tournament)


def rank_key(tournament: Tournament) -> RankKey:
    """Return the within-score ranking key for the round about to be paired.

    After the seeding rounds a higher Burstein index (Buchholz, median
    Buchholz, Sonneborn-Berger) ranks first; the pairing number breaks ties.
    """
    if is_seeding_round(tournament):
        return lambda index: (index,)

    tiebreaks = TiebreakCalculator(tournament).calculate_all_tiebreaks()

    def key(index: PlayerIndex) -> tuple:
        values = tiebreaks[index]
        return tuple(-values[name] for name in BURSTEIN_INDEX_ORDER) + (index,)

    return key


def pairing_order(tournament: Tournament) -> List[PlayerIndex]:
    """Active players in the order they are paired."""
    key = rank_key(tournament)
    return sorted(
        tournament.active_indices(),
        key=lambda i: (-tournament.pairing_score(i), key(i)),
    )


def compute_burstein_matching(
    tournament: Tournament, diagnostics: Optional[TextIO] = None
) -> Matching:
    """Pair the next round with the Burstein system.

    Raises:
        NoValidPairingException: If no legal matching exists
    """
    if diagnostics is not None:
        phase = "seeding" if is_seeding_round(tournament) else "Burstein index"
        diagnostics.write(
            f"Round {tournament.next_round} ({SYSTEM_BURSTEIN}, {phase} ranking)\n\n"
        )
        print_checklist(
            diagnostics,
            checklist_headers(tournament),
            checklist_row(tournament),
            tournament,
            pairing_order(tournament),
        )
    return compute_matching(tournament, rank_key(tournament), diagnostics)


# --- Baku acceleration ---


def accelerated_rounds(total_rounds: int) -> int:
    return math.ceil(total_rounds / 2)


def acceleration_group_size(player_count: int) -> int:
    """Players in the accelerated group A: twice a quarter of the field, rounded up."""
    return 2 * math.ceil(player_count / ACCELERATION_GROUP_DIVISOR)


def baku_bonus(tournament: Tournament, round_number: int) -> float:
    """Virtual points group A receives when the given round is paired.

    A win in the first half of the accelerated rounds, a draw in the
    second half, nothing afterwards.
    """
    total = tournament.config.expected_rounds
    if total is None:
        raise InvalidConfigurationException(
            "Baku acceleration needs the number of rounds of the tournament"
        )
    accelerated = accelerated_rounds(total)
    points = tournament.config.point_system
    if round_number <= math.ceil(accelerated / 2):
        return points.win
    if round_number <= accelerated:
        return points.draw
    return 0.0


def update_accelerations(tournament: Tournament) -> None:
    """Store the Baku acceleration of every player for the next round.

    Group A is taken by pairing number over the whole roster, so a
    withdrawal does not move players between groups.
    """
    round_number = tournament.next_round
    bonus = baku_bonus(tournament, round_number)
    group_size = acceleration_group_size(len(tournament.players))
    for index, player in enumerate(tournament.players):
        player.set_acceleration(round_number, bonus if index < group_size else 0.0)
    logger.info(
        "Round %s acceleration: %s virtual points for the first %s players",
        round_number,
        bonus,
        group_size,
    )


# --- Checklist ---


def checklist_headers(tournament: Tournament) -> List[str]:
    tiebreaks = [TIEBREAK_NAMES[name] for name in BURSTEIN_INDEX_ORDER]
    return ["No", "Name", "Pts", "Acc", *tiebreaks, "Due", "Byes", "History"]


def checklist_row(tournament: Tournament) -> ChecklistRowFunction:
    """Build the row function for the Burstein checklist."""
    indices = {id(player): i for i, player in enumerate(tournament.players)}
    tiebreaks = TiebreakCalculator(tournament).calculate_all_tiebreaks()

    def row(player: Player) -> List[str]:
        index = indices[id(player)]
        values = tiebreaks[index]
        return [
            str(index + 1),
            player.name,
            f"{tournament.base_score(index):g}",
            f"{player.acceleration_for(tournament.next_round):g}",
            *(f"{values[name]:g}" for name in BURSTEIN_INDEX_ORDER),
            format_due_color(player),
            str(player.bye_count),
            format_history(player) or "-",
        ]

    return row
