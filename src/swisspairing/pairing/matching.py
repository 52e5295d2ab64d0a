"""Matching engine shared by the Swiss systems.

Score groups are paired from the highest score down. Each group (with the
players floated into it) yields candidate outcomes, best first; an explicit
stack of frames remembers the outcome chosen for every group so that a
group which cannot be completed sends the search back to the next outcome
of the group above it.

Outcomes of one group are ordered by:

1. fewer floaters
2. fewer players floating down a second time
3. floater priority (lowest ranked players float first)

and, for a fixed floater set, the matching of the remaining players
minimises (repeat pairings, color preference violations, non-canonical
pairs). A canonical pair matches the i-th player of the top half with the
i-th player of the bottom half.
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
from itertools import chain, combinations
from typing import (
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    TextIO,
    Tuple,
)

from swisspairing.constants import MATCHING_NODE_BUDGET
from swisspairing.exceptions import NoValidPairingException
from swisspairing.pairing.colors import allocate_colors
from swisspairing.pairing.common import (
    Matching,
    color_preferences_are_compatible,
    sort_results,
)
from swisspairing.pairing.score_groups import (
    PlayerState,
    RankKey,
    ScoreGroup,
    build_player_states,
    order_bye_candidates,
    partition_score_groups,
)
from swisspairing.player import Color
from swisspairing.tournament import Tournament
from swisspairing.utils import setup_logger

logger = setup_logger(__name__)

RELAXATION_REPEATS = "repeat pairings allowed as a last resort"
RELAXATION_TOPSCORER_COLORS = "absolute colors relaxed for final-round topscorers"

PlayerPair = Tuple[PlayerState, PlayerState]
Penalty = Tuple[int, int, int]


@dataclass(frozen=True)
class BracketOutcome:
    """How one score group was resolved.

    Attributes:
        score: Score of the group
        pairs: Pairs formed in the group, colors not yet assigned
        floaters: Players moved down to the next group
        refloats: Floaters that had already floated into this group
        repeats: Pairs that already played each other
        color_violations: Pairs whose due colors clash
        canonical: Pairs of the i-th top-half with the i-th bottom-half player
    """

    score: float
    pairs: Tuple[PlayerPair, ...]
    floaters: Tuple[PlayerState, ...]
    refloats: int
    repeats: int
    color_violations: int
    canonical: int


@dataclass
class _Frame:
    """Search state of one score group."""

    group_index: int
    pool: Tuple[PlayerState, ...]
    outcomes: Iterator[BracketOutcome]
    repeats_before: int = 0
    outcome: Optional[BracketOutcome] = None


class _BracketSearch:
    """Depth-first branch and bound over the matchings of one set of players.

    The first unpaired player in pool order is paired with, in turn, its
    canonical partner, the following bottom-half players, the preceding
    bottom-half players, and finally the remaining top-half players. Once a
    matching is found the search keeps improving it until the node budget
    is spent. Branches with more repeat pairings than ``allowance`` are cut.
    """

    def __init__(
        self,
        engine: "MatchingEngine",
        players: Sequence[PlayerState],
        allowance: Optional[int] = None,
    ):
        self.engine = engine
        self.players = players
        self.allowance = allowance
        self.half = len(players) // 2
        self.used = [False] * len(players)
        self.pairs: List[PlayerPair] = []
        self.best: Optional[Tuple[PlayerPair, ...]] = None
        self.best_penalty: Optional[Penalty] = None
        self.nodes = 0

    def run(self) -> Optional[Tuple[Tuple[PlayerPair, ...], Penalty]]:
        if not self._feasible():
            return None
        self._extend(0, (0, 0, 0))
        if self.best is None:
            return None
        return self.best, self.best_penalty

    def _feasible(self) -> bool:
        """Cheap necessary conditions for a complete matching to exist."""
        if not self.engine.final_round:
            for color in (Color.WHITE, Color.BLACK):
                demanding = sum(1 for p in self.players if p.absolute_color == color)
                if demanding > len(self.players) // 2:
                    return False
        return all(
            any(
                self.engine.is_legal(player, other)
                for other in self.players
                if other is not player
            )
            for player in self.players
        )

    def _exhausted(self) -> bool:
        return self.best is not None and self.nodes > self.engine.node_budget

    def _candidates(self, position: int) -> Iterable[int]:
        size = len(self.players)
        if position < self.half:
            partner = position + self.half
            return chain(
                range(partner, size),
                range(self.half, partner),
                range(position + 1, self.half),
            )
        return range(position + 1, size)

    def _extend(self, start: int, penalty: Penalty) -> None:
        self.nodes += 1
        position = next(
            (i for i in range(start, len(self.players)) if not self.used[i]), None
        )
        if position is None:
            if self.best_penalty is None or penalty < self.best_penalty:
                self.best_penalty = penalty
                self.best = tuple(self.pairs)
            return

        first = self.players[position]
        self.used[position] = True
        for other in self._candidates(position):
            if self._exhausted():
                break
            if self.used[other]:
                continue
            second = self.players[other]
            if not self.engine.is_legal(first, second):
                continue
            candidate = (
                penalty[0] + (1 if second.index in first.opponents else 0),
                penalty[1]
                + (
                    0
                    if color_preferences_are_compatible(
                        first.due_color, second.due_color
                    )
                    else 1
                ),
                penalty[2] + (0 if other == position + self.half else 1),
            )
            if self.allowance is not None and candidate[0] > self.allowance:
                continue
            if self.best_penalty is not None and candidate >= self.best_penalty:
                continue
            self.used[other] = True
            self.pairs.append((first, second))
            self._extend(position + 1, candidate)
            self.pairs.pop()
            self.used[other] = False
        self.used[position] = False


class MatchingEngine:
    """Computes the matching of the next round of a tournament.

    Parameters
    ----------
    tournament : Tournament
        The tournament to pair; it is only read
    rank_key : callable
        Maps a player index to the system's ranking key within a score
    diagnostics : TextIO, optional
        Sink for a human-readable account of the search
    node_budget : int
        Nodes explored per floater set once a legal matching is known
    """

    def __init__(
        self,
        tournament: Tournament,
        rank_key: RankKey,
        diagnostics: Optional[TextIO] = None,
        node_budget: int = MATCHING_NODE_BUDGET,
    ) -> None:
        self.tournament = tournament
        self.rank_key = rank_key
        self.diagnostics = diagnostics
        self.node_budget = node_budget
        self.initial_color = tournament.config.initial_color
        self.final_round = tournament.is_final_round
        self.forbidden_pairs = frozenset(tournament.forbidden_pairs)
        self.allow_repeats = False
        self.repeat_budget: Optional[int] = None
        self._unresolved: Optional[ScoreGroup] = None
        self._unresolved_depth = -1

    def _write(self, text: str) -> None:
        if self.diagnostics is not None:
            self.diagnostics.write(text + "\n")

    # --- Legality ---

    def is_legal(self, first: PlayerState, second: PlayerState) -> bool:
        """Check the hard constraints for a pair.

        Forbidden pairs never meet; players who already played only meet
        when repeats are allowed; absolute colors must be compatible unless
        a topscorer is involved in the final round.
        """
        if frozenset({first.index, second.index}) in self.forbidden_pairs:
            return False
        if not self.allow_repeats and second.index in first.opponents:
            return False
        if not color_preferences_are_compatible(
            first.absolute_color, second.absolute_color
        ):
            return self.final_round and (first.topscorer or second.topscorer)
        return True

    # --- Entry point ---

    def compute(self) -> Matching:
        """Pair the next round.

        Raises:
            NoValidPairingException: If no legal matching exists
        """
        states = build_player_states(self.tournament, self.rank_key)
        logger.info(
            "Pairing round %s with %s active players",
            self.tournament.next_round,
            len(states),
        )

        self.allow_repeats = False
        self.repeat_budget = None
        found = self._pair_with_bye(states)

        if found is None and self.tournament.config.allow_repeat_pairings:
            logger.warning(
                "No pairing without repeats for round %s, allowing repeat pairings",
                self.tournament.next_round,
            )
            self._write(f"Relaxation: {RELAXATION_REPEATS}")
            self.allow_repeats = True
            # the first budget that succeeds is the fewest repeats overall
            for budget in range(1, len(states) // 2 + 1):
                self.repeat_budget = budget
                found = self._pair_with_bye(states)
                if found is not None:
                    logger.info("Round paired with %s repeat pairing(s)", budget)
                    break

        if found is not None:
            outcomes, bye = found
            return self._build_matching(outcomes, bye)

        message = "No valid pairing exists"
        if self._unresolved is not None:
            message += (
                f": score group {self._unresolved.score:g} "
                f"({len(self._unresolved)} players) could not be resolved"
            )
        logger.info(message)
        self._write(message)
        raise NoValidPairingException(message)

    def _pair_with_bye(
        self, states: List[PlayerState]
    ) -> Optional[Tuple[List[BracketOutcome], Optional[PlayerState]]]:
        if len(states) % 2 == 0:
            outcomes = self._search(states)
            return None if outcomes is None else (outcomes, None)

        for candidate in order_bye_candidates(states):
            remaining = [s for s in states if s.index != candidate.index]
            outcomes = self._search(remaining)
            if outcomes is not None:
                return outcomes, candidate
            logger.debug(
                "No pairing with a bye for player %s, trying next candidate",
                candidate.pairing_number,
            )
        return None

    # --- Score group search ---

    def _search(self, players: List[PlayerState]) -> Optional[List[BracketOutcome]]:
        """Pair all players, group by group, backtracking over group outcomes."""
        if not players:
            return []
        groups = partition_score_groups(players)
        lower_players = [
            tuple(chain.from_iterable(g.players for g in groups[i + 1 :]))
            for i in range(len(groups))
        ]

        def new_frame(
            group_index: int, floaters: Tuple[PlayerState, ...], repeats_before: int
        ) -> _Frame:
            pool = floaters + groups[group_index].players
            incoming = frozenset(p.index for p in floaters)
            allowance = (
                None
                if self.repeat_budget is None
                else self.repeat_budget - repeats_before
            )
            outcomes = self._bracket_outcomes(
                groups[group_index].score,
                pool,
                incoming,
                lower_players[group_index],
                group_index == len(groups) - 1,
                allowance,
            )
            return _Frame(group_index, pool, outcomes, repeats_before)

        stack = [new_frame(0, (), 0)]
        while stack:
            frame = stack[-1]
            outcome = next(frame.outcomes, None)
            if outcome is None:
                stack.pop()
                if frame.group_index > self._unresolved_depth:
                    self._unresolved_depth = frame.group_index
                    self._unresolved = groups[frame.group_index]
                logger.debug(
                    "Score group %s exhausted, backtracking",
                    groups[frame.group_index].score,
                )
                continue
            frame.outcome = outcome
            if frame.group_index + 1 == len(groups):
                return [f.outcome for f in stack]
            stack.append(
                new_frame(
                    frame.group_index + 1,
                    outcome.floaters,
                    frame.repeats_before + outcome.repeats,
                )
            )
        return None

    def _bracket_outcomes(
        self,
        score: float,
        pool: Tuple[PlayerState, ...],
        incoming: FrozenSet[int],
        lower_players: Tuple[PlayerState, ...],
        is_last: bool,
        allowance: Optional[int] = None,
    ) -> Iterator[BracketOutcome]:
        if is_last:
            if len(pool) % 2:
                return
            floater_counts: Iterable[int] = (0,)
        else:
            floater_counts = range(len(pool) % 2, len(pool) + 1, 2)

        for count in floater_counts:
            for floaters, refloats in self._floater_sets(pool, incoming, count):
                if not self._floaters_can_be_paired(floaters, lower_players):
                    continue
                floating = {p.index for p in floaters}
                remaining = [p for p in pool if p.index not in floating]
                found = _BracketSearch(self, remaining, allowance).run()
                if found is None:
                    continue
                pairs, (repeats, violations, non_canonical) = found
                yield BracketOutcome(
                    score=score,
                    pairs=pairs,
                    floaters=tuple(sorted(floaters, key=lambda p: p.rank)),
                    refloats=refloats,
                    repeats=repeats,
                    color_violations=violations,
                    canonical=len(pairs) - non_canonical,
                )

    def _floater_sets(
        self,
        pool: Tuple[PlayerState, ...],
        incoming: FrozenSet[int],
        count: int,
    ) -> Iterator[Tuple[Tuple[PlayerState, ...], int]]:
        """Yield floater sets of the given size with how many float again.

        Sets in which fewer incoming floaters float again come first; within
        that, lower ranked players are chosen first.
        """
        movers = [p for p in reversed(pool) if p.index in incoming]
        residents = [p for p in reversed(pool) if p.index not in incoming]
        for refloats in range(0, min(count, len(movers)) + 1):
            if count - refloats > len(residents):
                continue
            for again in combinations(movers, refloats):
                for fresh in combinations(residents, count - refloats):
                    yield again + fresh, refloats

    def _floaters_can_be_paired(
        self,
        floaters: Tuple[PlayerState, ...],
        lower_players: Tuple[PlayerState, ...],
    ) -> bool:
        for floater in floaters:
            others = chain(lower_players, (f for f in floaters if f is not floater))
            if not any(self.is_legal(floater, other) for other in others):
                return False
        return True

    # --- Result ---

    def _build_matching(
        self, outcomes: List[BracketOutcome], bye: Optional[PlayerState]
    ) -> Matching:
        pairings = []
        relaxations = []
        for outcome in outcomes:
            self._write(
                f"Score group {outcome.score:g}: {len(outcome.pairs)} pairs, "
                f"{len(outcome.floaters)} floaters, "
                f"{outcome.color_violations} color conflicts"
            )
            for first, second in outcome.pairs:
                pairings.append(allocate_colors(first, second, self.initial_color))
                if not color_preferences_are_compatible(
                    first.absolute_color, second.absolute_color
                ):
                    if RELAXATION_TOPSCORER_COLORS not in relaxations:
                        relaxations.append(RELAXATION_TOPSCORER_COLORS)

        if any(outcome.repeats for outcome in outcomes):
            relaxations.insert(0, RELAXATION_REPEATS)
        for relaxation in relaxations:
            self._write(f"Relaxation used: {relaxation}")

        matching = Matching(
            pairings=sort_results(pairings, self.tournament),
            bye=bye.index if bye else None,
            relaxations=relaxations,
        )
        if bye:
            self._write(f"Bye: player {bye.pairing_number}")
        logger.info(
            "Round %s paired: %s boards%s",
            self.tournament.next_round,
            len(matching.pairings),
            f", bye for player {bye.pairing_number}" if bye else "",
        )
        return matching


def compute_matching(
    tournament: Tournament,
    rank_key: RankKey,
    diagnostics: Optional[TextIO] = None,
) -> Matching:
    """Pair the next round of ``tournament`` ranking players with ``rank_key``."""
    return MatchingEngine(tournament, rank_key, diagnostics).compute()
