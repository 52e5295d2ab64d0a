"""Type hints used in Swiss Pairing."""

from typing import Callable, Sequence, Tuple

# Dense, stable handle into Tournament.players
PlayerIndex = int

# A (white, black) pair of player indices
PairingIds = Tuple[PlayerIndex, PlayerIndex]

# Checklist rows
ChecklistHeaders = Sequence[str]
ChecklistRowFunction = Callable[["Player"], Sequence[str]]

#  LocalWords:  PairingIds
