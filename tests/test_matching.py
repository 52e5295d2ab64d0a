import io

import pytest

from swisspairing.exceptions import (
    ErrorKind,
    NoValidPairingException,
    UnapplicableFeatureException,
)
from swisspairing.pairing.common import Pairing
from swisspairing.pairing.matching import (
    RELAXATION_REPEATS,
    MatchingEngine,
    compute_matching,
)
from swisspairing.pairing.registry import get_info
from swisspairing.pairing.score_groups import PlayerState
from swisspairing.player import Color, ColorPreference, MatchResult, PreferenceStrength
from swisspairing.tournament import Tournament, TournamentConfig


def by_pairing_number(index):
    return (index,)


def _tournament(ratings, **config):
    tournament = Tournament(TournamentConfig(**config))
    for number, rating in enumerate(ratings, start=1):
        tournament.add_player(f"Player {number}", rating)
    return tournament


def _assert_everyone_once(tournament, matching):
    seen = [i for pairing in matching.pairings for i in pairing.players]
    if matching.bye is not None:
        seen.append(matching.bye)
    assert sorted(seen) == tournament.active_indices()


def test_four_players_top_half_against_bottom_half():
    tournament = _tournament([3, 3, 1, 1])
    matching = get_info("burstein").compute_matching(tournament, None)

    assert matching.pairings == [Pairing(0, 2), Pairing(3, 1)]
    assert matching.bye is None
    assert matching.relaxations == []


def test_score_groups_are_paired_separately():
    tournament = _tournament([2000, 1900, 1800, 1700])
    for index, bonus in enumerate([3.0, 3.0, 1.0, 1.0]):
        tournament.player(index).set_acceleration(1, bonus)

    matching = compute_matching(tournament, by_pairing_number)
    assert matching.pairings == [Pairing(0, 1), Pairing(2, 3)]


def test_three_players_bye_to_lowest_ranked_of_lowest_group():
    tournament = _tournament([2000, 1900, 1800])
    for index, bonus in enumerate([2.0, 1.0, 1.0]):
        tournament.player(index).set_acceleration(1, bonus)

    matching = compute_matching(tournament, by_pairing_number)
    assert matching.bye == 2
    assert matching.pairings == [Pairing(0, 1)]


def test_bye_goes_to_player_without_a_bye():
    tournament = _tournament([2000, 1900, 1800])
    tournament.record_game(0, 1, MatchResult.WIN)
    tournament.record_bye(2)

    matching = get_info("burstein").compute_matching(tournament, None)
    assert matching.bye == 1
    # The leader played white and is due black
    assert matching.pairings == [Pairing(2, 0)]


def test_players_who_met_float_down_together():
    tournament = _tournament([2000, 1900, 1800, 1700])
    tournament.record_game(0, 1, MatchResult.DRAW)
    tournament.record_game(2, 3, MatchResult.DRAW)
    tournament.player(0).set_acceleration(2, 1.0)
    tournament.player(1).set_acceleration(2, 1.0)

    diagnostics = io.StringIO()
    matching = compute_matching(tournament, by_pairing_number, diagnostics)

    # Color preferences outrank the canonical top/bottom pairing
    assert matching.pairings == [Pairing(3, 0), Pairing(1, 2)]
    assert "Score group 1.5: 0 pairs, 2 floaters" in diagnostics.getvalue()


def test_diagnostics_do_not_change_the_result():
    tournament = _tournament([2000, 1900, 1800, 1700, 1600, 1500])
    tournament.record_game(0, 3, MatchResult.WIN)
    tournament.record_game(4, 1, MatchResult.DRAW)
    tournament.record_game(2, 5, MatchResult.LOSS)

    silent = compute_matching(tournament, by_pairing_number)
    verbose = compute_matching(tournament, by_pairing_number, io.StringIO())
    assert silent == verbose
    _assert_everyone_once(tournament, silent)


def test_no_valid_pairing_when_nobody_is_left_to_float_to():
    tournament = _tournament([2000, 1900])
    tournament.record_game(0, 1, MatchResult.WIN)

    with pytest.raises(NoValidPairingException) as excinfo:
        compute_matching(tournament, by_pairing_number)

    assert not isinstance(excinfo.value, UnapplicableFeatureException)
    assert excinfo.value.kind == ErrorKind.NO_VALID_PAIRING
    assert "score group 1" in excinfo.value.explanation


def test_repeat_pairing_as_last_resort_is_reported():
    tournament = _tournament([2000, 1900], allow_repeat_pairings=True)
    tournament.record_game(0, 1, MatchResult.WIN)

    diagnostics = io.StringIO()
    matching = compute_matching(tournament, by_pairing_number, diagnostics)

    assert matching.pairings == [Pairing(1, 0)]
    assert matching.relaxations == [RELAXATION_REPEATS]
    assert "Relaxation" in diagnostics.getvalue()


def test_repeat_pairings_are_minimised_across_score_groups():
    tournament = _tournament([2000, 1900, 1800, 1700], allow_repeat_pairings=True)
    tournament.record_game(0, 1, MatchResult.DRAW)
    tournament.record_game(3, 2, MatchResult.DRAW)
    tournament.record_game(2, 0, MatchResult.DRAW)
    tournament.record_game(0, 3, MatchResult.DRAW)
    # {0, 1} on 1.5 and {2, 3} on 1.0, each group a rematch
    tournament.player(1).set_acceleration(4, 1.0)

    diagnostics = io.StringIO()
    matching = compute_matching(tournament, by_pairing_number, diagnostics)

    # Floating the top group costs one rematch instead of two
    assert matching.pairings == [Pairing(3, 0), Pairing(1, 2)]
    assert matching.relaxations == [RELAXATION_REPEATS]
    assert "Score group 1.5: 0 pairs, 2 floaters" in diagnostics.getvalue()


def test_residents_float_before_incoming_floaters():
    tournament = _tournament([2000, 1900, 1800, 1700, 1600, 1500])
    tournament.record_game(0, 1, MatchResult.DRAW)
    tournament.record_game(4, 5, MatchResult.DRAW)
    tournament.record_game(2, 0, MatchResult.DRAW)
    for index, bonus in [(0, 2.0), (1, 1.5), (2, 1.5), (3, 2.0)]:
        tournament.player(index).set_acceleration(3, bonus)

    diagnostics = io.StringIO()
    matching = compute_matching(tournament, by_pairing_number, diagnostics)

    # Player 0 floats into {1, 2, 3}; floating 3 with 1 or 2 leaves 0 with
    # an old opponent, so 1 and 2 go down rather than 0 floating again
    assert matching.pairings == [Pairing(0, 3), Pairing(1, 4), Pairing(5, 2)]
    assert "Score group 2: 1 pairs, 2 floaters" in diagnostics.getvalue()


def test_upper_group_backtracks_when_lower_group_cannot_be_paired():
    tournament = _tournament([2000, 1900, 1800, 1700])
    tournament.record_game(2, 3, MatchResult.DRAW)
    tournament.player(0).set_acceleration(2, 1.0)
    tournament.player(1).set_acceleration(2, 1.0)

    diagnostics = io.StringIO()
    matching = compute_matching(tournament, by_pairing_number, diagnostics)

    # 0-1 pairs fine on its own but strands the rematch 2-3 below it
    assert matching.pairings == [Pairing(0, 2), Pairing(3, 1)]
    assert matching.relaxations == []
    output = diagnostics.getvalue()
    assert "Score group 1: 0 pairs, 2 floaters" in output
    assert "Score group 0.5: 2 pairs, 0 floaters" in output


def test_forbidden_pairs_are_never_paired():
    tournament = _tournament([2000, 1900, 1800, 1700])
    tournament.forbid_pair(0, 2)

    matching = compute_matching(tournament, by_pairing_number)
    assert matching.pairings == [Pairing(0, 3), Pairing(2, 1)]


def test_single_player_gets_the_bye():
    tournament = _tournament([2000])
    matching = compute_matching(tournament, by_pairing_number)
    assert matching.pairings == []
    assert matching.bye == 0


def test_no_players_no_pairings():
    matching = compute_matching(_tournament([]), by_pairing_number)
    assert matching.pairings == []
    assert matching.bye is None


def test_withdrawn_players_are_not_paired():
    tournament = _tournament([2000, 1900, 1800, 1700, 1600])
    tournament.withdraw(4)
    matching = compute_matching(tournament, by_pairing_number)
    assert matching.bye is None
    _assert_everyone_once(tournament, matching)


def _absolute_white(index, topscorer=False):
    return PlayerState(
        index=index,
        score=2.0,
        rank=index,
        preference=ColorPreference(Color.WHITE, PreferenceStrength.ABSOLUTE, -2),
        played_colors=(Color.BLACK, Color.BLACK),
        opponents=frozenset(),
        byes=0,
        topscorer=topscorer,
    )


def test_absolute_colors_relaxed_only_for_final_round_topscorers():
    tournament = _tournament([2000, 1900])
    engine = MatchingEngine(tournament, by_pairing_number)
    leader, other = _absolute_white(0, topscorer=True), _absolute_white(1)

    assert not engine.is_legal(leader, other)

    engine.final_round = True
    assert engine.is_legal(leader, other)
    assert not engine.is_legal(_absolute_white(0), other)

    tournament.forbid_pair(0, 1)
    assert not MatchingEngine(tournament, by_pairing_number).is_legal(leader, other)
