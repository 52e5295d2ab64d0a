"""Pairing core for Swiss Pairing.

This package provides the matching engine, the color allocator, the
result ordering and the registry of supported Swiss systems.
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

from swisspairing.pairing.common import (
    Matching,
    Pairing,
    color_preferences_are_compatible,
    find_first_color_difference,
    print_checklist,
    rank_players,
    sort_results,
)
from swisspairing.pairing.matching import MatchingEngine, compute_matching
from swisspairing.pairing.registry import Info, SwissSystem, get_info

__all__ = [
    "Pairing",
    "Matching",
    "MatchingEngine",
    "compute_matching",
    "color_preferences_are_compatible",
    "find_first_color_difference",
    "sort_results",
    "rank_players",
    "print_checklist",
    "SwissSystem",
    "Info",
    "get_info",
]
