import pytest

from tournament_pool.exceptions import TournamentNotFound
from tournament_pool.models import OutcomePrediction, Player, Team
from tournament_pool.schemas import ActualOutcomes, TournamentConfig
from tournament_pool.services.outcomes import calculate_outcome_score, score_outcomes

CONFIG = TournamentConfig(
    game_exact_score_points=2,
    game_correct_outcome_points=1,
    champion_points=5,
    runner_up_points=3,
    third_place_points=1,
    individual_award_points=3,
    qualified_team_points=1,
    exact_position_qualified_points=1,
    max_silver_games=0,
    max_golden_games=0,
)

ACTUAL = ActualOutcomes(
    is_concluded=True,
    champion_team_id=1,
    runner_up_team_id=2,
    third_place_team_id=3,
    best_player_id=10,
    top_goalscorer_player_id=11,
    best_goalkeeper_player_id=12,
    best_young_player_id=13,
)


def test_pending_until_concluded():
    prediction = OutcomePrediction(user_id=1, tournament_id=1, champion_team_id=1)

    score = score_outcomes(prediction, ActualOutcomes(champion_team_id=1), CONFIG)

    assert score.status == "pending"
    assert score.total == 0


def test_no_prediction_scores_zero():
    score = score_outcomes(None, ACTUAL, CONFIG)

    assert score.status == "complete"
    assert score.total == 0


def test_exact_matches_only():
    prediction = OutcomePrediction(
        user_id=1,
        tournament_id=1,
        champion_team_id=2,
        runner_up_team_id=1,
        third_place_team_id=3,
        best_player_id=10,
        top_goalscorer_player_id=12,
    )

    score = score_outcomes(prediction, ACTUAL, CONFIG)

    assert (score.champion, score.runner_up, score.third_place) == (0, 0, 1)
    assert score.best_player == 3
    assert score.top_goalscorer == 0
    assert score.honor_roll_score == 1
    assert score.individual_awards_score == 3
    assert score.total == 4


def test_unset_actual_does_not_match_unset_pick():
    actual = ActualOutcomes(is_concluded=True, champion_team_id=1)
    prediction = OutcomePrediction(user_id=1, tournament_id=1, champion_team_id=1)

    score = score_outcomes(prediction, actual, CONFIG)

    assert score.champion == 5
    assert score.individual_awards_score == 0


def test_calculate_outcome_score(session, tournament, users):
    champion = Team(name="Champion")
    runner_up = Team(name="Runner Up")
    session.add_all([champion, runner_up])
    session.commit()
    player = Player(tournament_id=tournament.id, team_id=champion.id, name="Star")
    session.add(player)
    session.commit()

    session.add(OutcomePrediction(
        user_id=users[0].id,
        tournament_id=tournament.id,
        champion_team_id=champion.id,
        runner_up_team_id=runner_up.id,
        best_player_id=player.id,
    ))
    tournament.is_concluded = True
    tournament.champion_team_id = champion.id
    tournament.runner_up_team_id = champion.id
    tournament.best_player_id = player.id
    session.add(tournament)
    session.commit()

    score = calculate_outcome_score(session, users[0].id, tournament.id)

    # Tournament defaults: champion 5, award 3
    assert score.champion == 5
    assert score.runner_up == 0
    assert score.best_player == 3
    assert score.total == 8


def test_calculate_outcome_score_unknown_tournament(session):
    with pytest.raises(TournamentNotFound):
        calculate_outcome_score(session, 1, 999)
