import pytest

from tournament_pool.exceptions import TournamentNotFound
from tournament_pool.models import TournamentScore
from tournament_pool.services.leaderboard import calculate_ranks, get_leaderboard


def test_competition_ranking():
    ranks = calculate_ranks([(3, 5), (1, 10), (2, 10), (4, 1)])

    assert ranks == {1: 1, 2: 1, 3: 3, 4: 4}


def test_leaderboard_rank_change(session, tournament, users):
    u1, u2, u3 = users
    session.add_all([
        TournamentScore(user_id=u1.id, tournament_id=tournament.id, total_score=10, yesterday_total_score=2),
        TournamentScore(user_id=u2.id, tournament_id=tournament.id, total_score=7, yesterday_total_score=7),
        TournamentScore(user_id=u3.id, tournament_id=tournament.id, total_score=7, yesterday_total_score=5),
    ])
    session.commit()

    entries = get_leaderboard(session, tournament.id)

    assert [(e.user_id, e.rank) for e in entries] == [(u1.id, 1), (u2.id, 2), (u3.id, 2)]
    # Yesterday: u2 first, u3 second, u1 third
    assert [e.rank_change for e in entries] == [2, -1, 0]


def test_leaderboard_unknown_tournament(session):
    with pytest.raises(TournamentNotFound):
        get_leaderboard(session, 999)
