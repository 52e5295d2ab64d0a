import pytest

from swisspairing.pairing import Matching, Pairing
from swisspairing.player import MatchResult
from swisspairing.tournament import Tournament, TournamentConfig
from swisspairing.validation.checker import (
    ABSOLUTE_COLOR,
    BYE,
    COLOR_PREFERENCE,
    COVERAGE,
    REPEAT,
    CriterionStatus,
    MatchingValidator,
    ViolationType,
    validate_matching,
)


@pytest.fixture
def validator():
    return MatchingValidator()


def _tournament(count, **config):
    tournament = Tournament(TournamentConfig(**config))
    for number in range(1, count + 1):
        tournament.add_player(f"Player {number}")
    return tournament


def _criterion(report, name):
    return next(r for r in report.criteria_results if r.criterion == name)


def test_valid_matching():
    tournament = _tournament(5)
    matching = Matching([Pairing(0, 2), Pairing(3, 1)], bye=4)

    report = validate_matching(tournament, matching)

    assert report.is_valid
    assert report.total_criteria == 5
    assert report.compliance_percentage == 100.0
    assert report.summary == "Valid matching; 0 warnings"


def test_missing_and_duplicated_players(validator):
    tournament = _tournament(4)
    matching = Matching([Pairing(0, 1), Pairing(1, 2)])

    result = validator.check_coverage(tournament, matching)

    assert result.status == CriterionStatus.VIOLATION
    assert result.details["duplicated"] == [1]
    assert result.details["missing"] == [3]


def test_withdrawn_player_may_not_be_paired(validator):
    tournament = _tournament(4)
    tournament.withdraw(3)
    matching = Matching([Pairing(0, 1), Pairing(2, 3)])

    result = validator.check_coverage(tournament, matching)

    assert result.details["unexpected"] == [3]
    assert result.details["unknown"] == []


def test_unknown_player_stops_validation():
    tournament = _tournament(2)
    report = validate_matching(tournament, Matching([Pairing(0, 7)], bye=1))

    assert not report.is_valid
    assert [r.criterion for r in report.criteria_results] == [COVERAGE]
    assert report.summary.startswith("Invalid matching")


def test_repeat_pairing(validator):
    tournament = _tournament(2)
    tournament.record_game(0, 1, MatchResult.DRAW)

    result = validator.check_repeats(tournament, Matching([Pairing(1, 0)]))

    assert result.violation_type == ViolationType.ABSOLUTE
    assert result.details["repeats"] == [(1, 0)]


def test_allowed_repeat_is_a_warning():
    tournament = _tournament(2, allow_repeat_pairings=True)
    tournament.record_game(0, 1, MatchResult.DRAW)

    report = validate_matching(tournament, Matching([Pairing(1, 0)]))

    assert report.is_valid
    assert [w.criterion for w in report.warnings] == [REPEAT]
    assert report.summary == "Valid matching; 1 warnings"


def test_forfeit_is_not_a_repeat(validator):
    tournament = _tournament(2)
    tournament.record_game(0, 1, MatchResult.WIN, game_was_played=False)

    result = validator.check_repeats(tournament, Matching([Pairing(1, 0)]))

    assert result.status == CriterionStatus.COMPLIANT


def test_forbidden_pair_is_never_allowed(validator):
    tournament = _tournament(2, allow_repeat_pairings=True)
    tournament.forbid_pair(0, 1)

    result = validator.check_repeats(tournament, Matching([Pairing(0, 1)]))

    assert result.violation_type == ViolationType.ABSOLUTE
    assert result.details["forbidden"] == [(0, 1)]


def test_bye_with_even_field(validator):
    tournament = _tournament(3)
    tournament.withdraw(2)

    result = validator.check_bye(tournament, Matching([], bye=0))

    assert result.violation_type == ViolationType.ABSOLUTE
    assert result.details == {"player": 0}


def test_missing_bye(validator):
    tournament = _tournament(3)
    result = validator.check_bye(tournament, Matching([Pairing(0, 1)]))
    assert result.status == CriterionStatus.VIOLATION


def test_even_field_without_bye(validator):
    tournament = _tournament(2)
    result = validator.check_bye(tournament, Matching([Pairing(0, 1)]))
    assert result.status == CriterionStatus.NOT_APPLICABLE


def _two_whites_each(**config):
    tournament = _tournament(4, **config)
    tournament.record_game(0, 2, MatchResult.WIN)
    tournament.record_game(1, 3, MatchResult.WIN)
    tournament.record_game(0, 3, MatchResult.WIN)
    tournament.record_game(1, 2, MatchResult.DRAW)
    return tournament


def test_absolute_color_violation():
    tournament = _two_whites_each()

    report = validate_matching(tournament, Matching([Pairing(0, 1), Pairing(2, 3)]))

    assert not report.is_valid
    assert [v.criterion for v in report.violations] == [ABSOLUTE_COLOR]
    assert _criterion(report, ABSOLUTE_COLOR).details["pairings"] == [(0, 1), (2, 3)]
    assert _criterion(report, COLOR_PREFERENCE).details["players"] == [0, 3]


def test_absolute_color_relaxed_for_topscorers():
    tournament = _two_whites_each(expected_rounds=3)
    tournament.withdraw(2)
    tournament.withdraw(3)

    report = validate_matching(tournament, Matching([Pairing(0, 1)]))

    assert report.is_valid
    assert {w.criterion for w in report.warnings} == {ABSOLUTE_COLOR, COLOR_PREFERENCE}


@pytest.mark.parametrize(
    "players, rounds, repeats",
    [(4, 3, None), (4, 4, 2), (5, 5, None), (5, 6, 2), (1, 5, None)],
)
def test_tournament_feasibility(validator, players, rounds, repeats):
    result = validator.check_tournament_feasibility(players, rounds)
    if repeats is None:
        assert result is None
    else:
        assert result.criterion == REPEAT
        assert result.details["min_repeat_pairings"] == repeats


def test_bye_criterion_reports_pairing_number(validator):
    tournament = _tournament(1)
    result = validator.check_bye(tournament, Matching([], bye=0))
    assert result.criterion == BYE
    assert result.description == "Bye assigned to player 1"
