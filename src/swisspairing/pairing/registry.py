"""Registry of the supported Swiss systems.

Each system is described by an ``Info`` record of plain callables, looked
up by ``SwissSystem`` tag or by its string identifier.
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
from typing import Callable, Dict, List, Optional, TextIO, Union

from swisspairing.constants import SYSTEM_BASIC, SYSTEM_BURSTEIN
from swisspairing.exceptions import (
    InvalidConfigurationException,
    UnapplicableFeatureException,
)
from swisspairing.pairing import basic, burstein
from swisspairing.pairing.common import Matching, print_checklist
from swisspairing.pairing.score_groups import RankKey
from swisspairing.tournament import Tournament
from swisspairing.type_hints import ChecklistRowFunction, PlayerIndex
from swisspairing.utils import setup_logger

logger = setup_logger(__name__)


class SwissSystem(Enum):
    BURSTEIN = SYSTEM_BURSTEIN
    BASIC = SYSTEM_BASIC


@dataclass(frozen=True)
class Info:
    """Capabilities of one Swiss system.

    Attributes:
        system: The system this record describes
        compute_matching: Pairs the next round, optionally writing diagnostics
        rank_key: Builds the within-score ranking key for the next round
        checklist_headers: Column headers of the checklist
        checklist_row: Builds the Player -> row function of the checklist
        accelerator: Default acceleration, None when the system has none
    """

    system: SwissSystem
    compute_matching: Callable[[Tournament, Optional[TextIO]], Matching]
    rank_key: Callable[[Tournament], RankKey]
    checklist_headers: Callable[[Tournament], List[str]]
    checklist_row: Callable[[Tournament], ChecklistRowFunction]
    accelerator: Optional[Callable[[Tournament], None]] = None

    @property
    def name(self) -> str:
        return self.system.value

    @property
    def supports_acceleration(self) -> bool:
        return self.accelerator is not None

    def update_accelerations(self, tournament: Tournament) -> None:
        """Apply the system's default acceleration for the next round.

        Raises:
            UnapplicableFeatureException: If the system has no default acceleration
        """
        if self.accelerator is None:
            logger.error("Acceleration requested for the %s system", self.name)
            raise UnapplicableFeatureException(
                f"The {self.name} system has no default acceleration"
            )
        self.accelerator(tournament)

    def ranking(self, tournament: Tournament) -> List[PlayerIndex]:
        """Active players by pairing score, then the system's rank key."""
        key = self.rank_key(tournament)
        return sorted(
            tournament.active_indices(),
            key=lambda i: (-tournament.pairing_score(i), key(i)),
        )

    def print_checklist(self, stream: TextIO, tournament: Tournament) -> None:
        print_checklist(
            stream,
            self.checklist_headers(tournament),
            self.checklist_row(tournament),
            tournament,
            self.ranking(tournament),
        )


_SYSTEMS: Dict[SwissSystem, Info] = {
    SwissSystem.BURSTEIN: Info(
        system=SwissSystem.BURSTEIN,
        compute_matching=burstein.compute_burstein_matching,
        rank_key=burstein.rank_key,
        checklist_headers=burstein.checklist_headers,
        checklist_row=burstein.checklist_row,
        accelerator=burstein.update_accelerations,
    ),
    SwissSystem.BASIC: Info(
        system=SwissSystem.BASIC,
        compute_matching=basic.compute_basic_matching,
        rank_key=basic.rank_key,
        checklist_headers=basic.checklist_headers,
        checklist_row=basic.checklist_row,
    ),
}


def get_info(system: Union[SwissSystem, str]) -> Info:
    """Look up a Swiss system by tag or identifier.

    Raises:
        InvalidConfigurationException: If the system is unknown
    """
    if not isinstance(system, SwissSystem):
        try:
            system = SwissSystem(str(system).lower())
        except ValueError:
            raise InvalidConfigurationException(
                f"Unknown Swiss system: {system!r}"
            ) from None
    return _SYSTEMS[system]


def info_for(tournament: Tournament) -> Info:
    """The Info of the system configured for a tournament."""
    return get_info(tournament.config.swiss_system)


def available_systems() -> List[str]:
    return [system.value for system in SwissSystem]
