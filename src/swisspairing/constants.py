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

# Game outcome scores
WIN_SCORE = 1.0
DRAW_SCORE = 0.5
LOSS_SCORE = 0.0
FORFEIT_LOSS_SCORE = 0.0

# Pairing-allocated bye score (configurable per tournament)
BYE_SCORE = 1.0

# Result display strings (checklists and diagnostics)
RESULT_SYMBOLS = {
    "WIN": "1",
    "DRAW": "=",
    "LOSS": "0",
}
UNPLAYED_RESULT_SYMBOLS = {
    "WIN": "+",
    "DRAW": "=",
    "LOSS": "-",
}

# Swiss system identifiers
SYSTEM_BURSTEIN = "burstein"
SYSTEM_BASIC = "basic"
DEFAULT_SYSTEM = SYSTEM_BURSTEIN

# Baku acceleration: group A holds the first 2 * ceil(N / 4) players
ACCELERATION_GROUP_DIVISOR = 4

# Search limits
# Nodes explored per floater set once a legal matching has been found
MATCHING_NODE_BUDGET = 20000

# Checklist layout
CHECKLIST_COLUMN_SEPARATOR = "  "

# Environment variable naming a directory for rotating log files
LOG_DIR_ENV_VAR = "SWISSPAIRING_LOG_DIR"
LOG_FILE_NAME = "swiss-pairing.log"

# Tiebreaker keys used by the Burstein index
TB_BUCHHOLZ = "buchholz"
TB_BUCHHOLZ_MEDIAN = "buchholz_median"
TB_SONNEBORN_BERGER = "sb"
TB_PROGRESSIVE = "progressive"

TIEBREAK_NAMES = {
    TB_BUCHHOLZ: "BH",
    TB_BUCHHOLZ_MEDIAN: "MBH",
    TB_SONNEBORN_BERGER: "SB",
    TB_PROGRESSIVE: "Prog",
}

# Burstein index: compared in this order, all descending
BURSTEIN_INDEX_ORDER = [
    TB_BUCHHOLZ,
    TB_BUCHHOLZ_MEDIAN,
    TB_SONNEBORN_BERGER,
]
