"""Basic Swiss system: the shared engine ranked by pairing number only."""

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

from typing import List, Optional, TextIO

from swisspairing.constants import SYSTEM_BASIC
from swisspairing.pairing.common import (
    Matching,
    format_due_color,
    format_history,
    print_checklist,
    rank_players,
)
from swisspairing.pairing.matching import compute_matching
from swisspairing.pairing.score_groups import RankKey
from swisspairing.player import Player
from swisspairing.tournament import Tournament
from swisspairing.type_hints import ChecklistRowFunction


def rank_key(tournament: Tournament) -> RankKey:
    return lambda index: (index,)


def compute_basic_matching(
    tournament: Tournament, diagnostics: Optional[TextIO] = None
) -> Matching:
    if diagnostics is not None:
        diagnostics.write(f"Round {tournament.next_round} ({SYSTEM_BASIC})\n\n")
        print_checklist(
            diagnostics,
            checklist_headers(tournament),
            checklist_row(tournament),
            tournament,
            rank_players(tournament, tournament.active_indices(), accelerated=True),
        )
    return compute_matching(tournament, rank_key(tournament), diagnostics)


def checklist_headers(tournament: Tournament) -> List[str]:
    return ["No", "Name", "Pts", "Due", "Byes", "History"]


def checklist_row(tournament: Tournament) -> ChecklistRowFunction:
    indices = {id(player): i for i, player in enumerate(tournament.players)}

    def row(player: Player) -> List[str]:
        index = indices[id(player)]
        return [
            str(index + 1),
            player.name,
            f"{tournament.base_score(index):g}",
            format_due_color(player),
            str(player.bye_count),
            format_history(player) or "-",
        ]

    return row
