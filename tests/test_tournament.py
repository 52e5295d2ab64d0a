import pytest

from swisspairing.constants import (
    TB_BUCHHOLZ,
    TB_BUCHHOLZ_MEDIAN,
    TB_PROGRESSIVE,
    TB_SONNEBORN_BERGER,
)
from swisspairing.exceptions import (
    ErrorKind,
    InvalidConfigurationException,
    InvalidResultException,
    PlayerNotFoundException,
)
from swisspairing.player import Color, MatchResult
from swisspairing.tournament import (
    PointSystem,
    TiebreakCalculator,
    Tournament,
    TournamentConfig,
)


def _tournament(count, **config):
    tournament = Tournament(TournamentConfig(**config))
    for number in range(1, count + 1):
        tournament.add_player(f"Player {number}", 2400 - 100 * number)
    return tournament


def test_scores_follow_the_point_system():
    points = PointSystem(win=3.0, draw=1.0, loss=0.0, pairing_allocated_bye=2.0)
    tournament = _tournament(5, point_system=points)
    tournament.record_game(0, 1, MatchResult.WIN)
    tournament.record_game(2, 3, MatchResult.DRAW)
    tournament.record_bye(4)

    assert [tournament.base_score(i) for i in range(5)] == [3.0, 0.0, 1.0, 1.0, 2.0]


def test_forfeits_and_absences():
    tournament = _tournament(4)
    tournament.record_game(0, 1, MatchResult.LOSS, game_was_played=False)
    tournament.record_absence(2, MatchResult.DRAW)
    tournament.record_absence(3)

    assert tournament.base_score(1) == 1.0
    assert tournament.base_score(2) == 0.5
    assert tournament.base_score(3) == 0.0
    # Forfeited games may be paired again and do not count for colors
    assert not tournament.have_met(0, 1)
    assert tournament.player(0).played_colors == []
    assert tournament.player(2).bye_count == 0


def test_rounds_and_final_round():
    tournament = _tournament(4, expected_rounds=2)
    assert tournament.next_round == 1
    assert not tournament.is_final_round

    tournament.record_game(0, 1, MatchResult.WIN)
    tournament.record_game(2, 3, MatchResult.DRAW)
    assert tournament.played_rounds == 1
    assert tournament.next_round == 2
    assert tournament.is_final_round
    assert tournament.is_topscorer(0)
    assert not tournament.is_topscorer(2)


def test_no_topscorers_when_rounds_unknown():
    tournament = _tournament(2)
    tournament.record_game(0, 1, MatchResult.WIN)
    assert not tournament.is_final_round
    assert not tournament.is_topscorer(0)


def test_pairing_score_includes_acceleration_for_next_round():
    tournament = _tournament(2)
    tournament.player(0).set_acceleration(1, 1.0)
    tournament.player(0).set_acceleration(2, 0.5)
    assert tournament.pairing_score(0) == 1.0

    tournament.record_game(0, 1, MatchResult.DRAW)
    assert tournament.pairing_score(0) == 1.0
    assert tournament.base_score(0) == 0.5


def test_unknown_player_is_an_error():
    tournament = _tournament(2)
    with pytest.raises(PlayerNotFoundException) as excinfo:
        tournament.player(2)
    assert excinfo.value.kind == ErrorKind.INTERNAL
    with pytest.raises(PlayerNotFoundException):
        tournament.forbid_pair(0, -1)


def test_player_cannot_play_itself():
    tournament = _tournament(2)
    with pytest.raises(InvalidResultException):
        tournament.record_game(1, 1, MatchResult.DRAW)


def test_forbidden_pairs_are_unordered():
    tournament = _tournament(3)
    tournament.forbid_pair(2, 0)
    assert tournament.is_forbidden(0, 2)
    assert not tournament.is_forbidden(0, 1)


def test_withdrawn_players_are_inactive():
    tournament = _tournament(3)
    tournament.withdraw(1)
    assert tournament.active_indices() == [0, 2]


@pytest.mark.parametrize(
    "config",
    [{"initial_color": Color.NONE}, {"expected_rounds": 0}],
)
def test_invalid_configuration(config):
    with pytest.raises(InvalidConfigurationException):
        TournamentConfig(**config)


def test_tiebreaks():
    tournament = _tournament(4)
    # Round 1
    tournament.record_game(0, 1, MatchResult.WIN)
    tournament.record_game(2, 3, MatchResult.DRAW)
    # Round 2
    tournament.record_game(2, 0, MatchResult.LOSS)
    tournament.record_game(3, 1, MatchResult.WIN)
    # Round 3
    tournament.record_game(0, 3, MatchResult.DRAW)
    tournament.record_game(1, 2, MatchResult.LOSS, game_was_played=False)

    # Scores: 0 -> 2.5, 1 -> 0, 2 -> 1.5, 3 -> 2
    tiebreaks = TiebreakCalculator(tournament).calculate_player_tiebreaks(0)
    assert tiebreaks[TB_BUCHHOLZ] == 0.0 + 1.5 + 2.0
    assert tiebreaks[TB_BUCHHOLZ_MEDIAN] == 1.5
    assert tiebreaks[TB_SONNEBORN_BERGER] == 0.0 + 1.5 + 1.0
    assert tiebreaks[TB_PROGRESSIVE] == 1.0 + 2.0 + 2.5

    # The forfeit win does not count toward Buchholz
    all_tiebreaks = TiebreakCalculator(tournament).calculate_all_tiebreaks()
    assert all_tiebreaks[2][TB_BUCHHOLZ] == 2.0 + 2.5
    assert all_tiebreaks[2][TB_BUCHHOLZ_MEDIAN] == 2.0 + 2.5
