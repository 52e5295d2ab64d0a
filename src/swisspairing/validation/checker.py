"""Matching checker - post-hoc validation of a computed round.

The checker looks at a tournament before the round's results are recorded
and reports, criterion by criterion, whether a matching honors the hard
pairing rules. It never repairs a matching.
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

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from swisspairing.pairing.common import Matching
from swisspairing.player import Color
from swisspairing.tournament import Tournament
from swisspairing.utils import setup_logger

logger = setup_logger(__name__)

COVERAGE = "COVERAGE"
REPEAT = "REPEAT"
ABSOLUTE_COLOR = "ABSOLUTE_COLOR"
BYE = "BYE"
COLOR_PREFERENCE = "COLOR_PREFERENCE"


class CriterionStatus(Enum):
    """Status of a criterion check."""

    COMPLIANT = "COMPLIANT"
    VIOLATION = "VIOLATION"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class ViolationType(Enum):
    """How serious a violation is."""

    ABSOLUTE = "ABSOLUTE"  # The matching is illegal
    QUALITY = "QUALITY"  # Legal, but a preference was not met
    WARNING = "WARNING"  # Allowed relaxation, reported


@dataclass
class CriterionResult:
    """Result of validating a single criterion."""

    criterion: str
    status: CriterionStatus
    violation_type: Optional[ViolationType] = None
    description: str = ""
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def is_violation(self) -> bool:
        return self.status == CriterionStatus.VIOLATION


@dataclass
class ValidationReport:
    """Complete validation report for one matching."""

    total_criteria: int
    compliant_count: int
    violations: List[CriterionResult]
    summary: str
    warnings: List[CriterionResult] = field(default_factory=list)
    criteria_results: List[CriterionResult] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def compliance_percentage(self) -> float:
        if self.total_criteria == 0:
            return 100.0
        return (self.compliant_count / self.total_criteria) * 100.0


def _compliant(criterion: str, description: str) -> CriterionResult:
    return CriterionResult(criterion, CriterionStatus.COMPLIANT, None, description)


def _violation(
    criterion: str,
    description: str,
    violation_type: ViolationType = ViolationType.ABSOLUTE,
    **details: object,
) -> CriterionResult:
    return CriterionResult(
        criterion, CriterionStatus.VIOLATION, violation_type, description, details
    )


class MatchingValidator:
    """Validates a matching against the tournament it was computed for."""

    def check_tournament_feasibility(
        self, num_players: int, num_rounds: int
    ) -> Optional[CriterionResult]:
        """Check whether the tournament can be played without repeat pairings.

        With N players there are N*(N-1)/2 distinct pairs, and R rounds need
        R * floor(N/2) of them.

        Returns:
            CriterionResult if repeats are inevitable, None otherwise.
        """
        if num_players < 2 or num_rounds < 1:
            return None
        distinct_pairs = num_players * (num_players - 1) // 2
        needed = num_rounds * (num_players // 2)
        if needed <= distinct_pairs:
            return None
        return _violation(
            REPEAT,
            f"{num_players} players over {num_rounds} rounds need {needed} "
            f"pairings, but only {distinct_pairs} distinct pairs exist",
            num_players=num_players,
            num_rounds=num_rounds,
            min_repeat_pairings=needed - distinct_pairs,
        )

    def check_coverage(
        self, tournament: Tournament, matching: Matching
    ) -> CriterionResult:
        """Every active player appears exactly once; nobody else appears."""
        appearances = Counter(
            index for pairing in matching.pairings for index in pairing.players
        )
        if matching.bye is not None:
            appearances[matching.bye] += 1

        active = set(tournament.active_indices())
        duplicated = sorted(i for i, count in appearances.items() if count > 1)
        missing = sorted(active - set(appearances))
        unexpected = sorted(set(appearances) - active)
        if not (duplicated or missing or unexpected):
            return _compliant(COVERAGE, "Every active player appears exactly once")
        return _violation(
            COVERAGE,
            f"Duplicated: {duplicated}, missing: {missing}, not active: {unexpected}",
            duplicated=duplicated,
            missing=missing,
            unexpected=unexpected,
            unknown=[i for i in unexpected if not 0 <= i < len(tournament.players)],
        )

    def check_repeats(
        self, tournament: Tournament, matching: Matching
    ) -> CriterionResult:
        """No forbidden pairs; no repeats unless the tournament allows them."""
        forbidden = []
        repeats = []
        for pairing in matching.pairings:
            if tournament.is_forbidden(pairing.white, pairing.black):
                forbidden.append(pairing.as_ids())
            elif tournament.player(pairing.white).has_played(pairing.black):
                repeats.append(pairing.as_ids())

        if forbidden or (repeats and not tournament.config.allow_repeat_pairings):
            return _violation(
                REPEAT,
                f"Forbidden pairs: {forbidden}, repeat pairs: {repeats}",
                forbidden=forbidden,
                repeats=repeats,
            )
        if repeats:
            return _violation(
                REPEAT,
                f"Repeat pairs allowed as a last resort: {repeats}",
                ViolationType.WARNING,
                repeats=repeats,
            )
        return _compliant(REPEAT, "No repeat or forbidden pairings")

    def check_absolute_colors(
        self, tournament: Tournament, matching: Matching
    ) -> CriterionResult:
        """Players with an absolute color preference receive that color.

        In the final round a pair involving a topscorer may break it.
        """
        violations = []
        relaxed = []
        for pairing in matching.pairings:
            white = tournament.player(pairing.white).color_preference()
            black = tournament.player(pairing.black).color_preference()
            if (
                white.absolute_color != Color.BLACK
                and black.absolute_color != Color.WHITE
            ):
                continue
            if any(tournament.is_topscorer(i) for i in pairing.players):
                relaxed.append(pairing.as_ids())
            else:
                violations.append(pairing.as_ids())

        if violations:
            return _violation(
                ABSOLUTE_COLOR,
                f"Absolute color not granted: {violations}",
                pairings=violations,
            )
        if relaxed:
            return _violation(
                ABSOLUTE_COLOR,
                f"Absolute color relaxed for topscorers: {relaxed}",
                ViolationType.WARNING,
                pairings=relaxed,
            )
        return _compliant(ABSOLUTE_COLOR, "All absolute colors granted")

    def check_bye(self, tournament: Tournament, matching: Matching) -> CriterionResult:
        """A single bye exactly when the number of active players is odd."""
        odd = len(tournament.active_indices()) % 2 == 1
        if odd and matching.bye is None:
            return _violation(BYE, "Odd number of players but no bye assigned")
        if not odd and matching.bye is not None:
            return _violation(
                BYE,
                f"Bye assigned to {matching.bye} with an even field",
                player=matching.bye,
            )
        if matching.bye is None:
            return CriterionResult(
                BYE, CriterionStatus.NOT_APPLICABLE, None, "No bye in this round"
            )
        return _compliant(BYE, f"Bye assigned to player {matching.bye + 1}")

    def check_color_preferences(
        self, tournament: Tournament, matching: Matching
    ) -> CriterionResult:
        """Count players who did not receive their due color."""
        unmet = []
        for pairing in matching.pairings:
            if tournament.player(pairing.white).due_color == Color.BLACK:
                unmet.append(pairing.white)
            if tournament.player(pairing.black).due_color == Color.WHITE:
                unmet.append(pairing.black)
        if not unmet:
            return _compliant(COLOR_PREFERENCE, "All due colors granted")
        return _violation(
            COLOR_PREFERENCE,
            f"{len(unmet)} players did not get their due color",
            ViolationType.QUALITY,
            players=unmet,
        )

    def validate(self, tournament: Tournament, matching: Matching) -> ValidationReport:
        """Validate a matching for the tournament's next round."""
        logger.info("Validating round %s matching", tournament.next_round)

        coverage = self.check_coverage(tournament, matching)
        results = [coverage]
        # The remaining checks look players up by index.
        if not coverage.details.get("unknown"):
            results += [
                self.check_repeats(tournament, matching),
                self.check_absolute_colors(tournament, matching),
                self.check_bye(tournament, matching),
                self.check_color_preferences(tournament, matching),
            ]

        failed = [r for r in results if r.is_violation]
        violations = [r for r in failed if r.violation_type == ViolationType.ABSOLUTE]
        warnings = [r for r in failed if r.violation_type != ViolationType.ABSOLUTE]
        if violations:
            summary = f"Invalid matching - {len(violations)} criteria failed: " + (
                ", ".join(r.criterion for r in violations)
            )
        else:
            summary = f"Valid matching; {len(warnings)} warnings"

        logger.info("Validation complete: %s", summary)
        return ValidationReport(
            total_criteria=len(results),
            compliant_count=sum(
                1 for r in results if r.status == CriterionStatus.COMPLIANT
            ),
            violations=violations,
            summary=summary,
            warnings=warnings,
            criteria_results=results,
        )


def validate_matching(tournament: Tournament, matching: Matching) -> ValidationReport:
    return MatchingValidator().validate(tournament, matching)
