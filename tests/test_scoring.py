from tournament_pool.models import Match, MatchGuess, MatchResult
from tournament_pool.schemas import TournamentConfig
from tournament_pool.services.scoring import (
    get_recommended_scoring_values,
    score_guesses_for_match,
    score_match,
)

CONFIG = TournamentConfig(
    game_exact_score_points=2,
    game_correct_outcome_points=1,
    champion_points=5,
    runner_up_points=3,
    third_place_points=1,
    individual_award_points=3,
    qualified_team_points=1,
    exact_position_qualified_points=1,
    max_silver_games=2,
    max_golden_games=1,
)


def guess(home, away, boost_type=None, **kwargs):
    return MatchGuess(user_id=1, match_id=1, home_score=home, away_score=away, boost_type=boost_type, **kwargs)


def result(home, away, **kwargs):
    return MatchResult(match_id=1, home_score=home, away_score=away, **kwargs)


def test_exact_score():
    score = score_match(guess(2, 1), result(2, 1), CONFIG)

    assert score.status == "complete"
    assert score.kind == "exact"
    assert score.points == 2
    assert score.breakdown == ["Exact Score (+2)"]


def test_correct_outcome():
    score = score_match(guess(1, 0), result(3, 1), CONFIG)

    assert score.kind == "outcome"
    assert score.points == 1
    assert score.breakdown == ["Correct Outcome (+1)"]


def test_correct_draw():
    assert score_match(guess(0, 0), result(2, 2), CONFIG).points == 1


def test_miss():
    score = score_match(guess(0, 1), result(1, 0), CONFIG)

    assert score.kind == "miss"
    assert score.points == 0
    assert score.breakdown == []


def test_pending_without_result():
    assert score_match(guess(1, 0), None, CONFIG).status == "pending"


def test_pending_with_draft_result():
    score = score_match(guess(1, 0), result(1, 0, is_draft=True), CONFIG)

    assert score.status == "pending"
    assert score.points == 0


def test_pending_with_incomplete_result():
    assert score_match(guess(1, 0), result(1, None), CONFIG).status == "pending"


def test_missing_guess_scores_zero():
    score = score_match(guess(None, None), result(1, 0), CONFIG)

    assert score.status == "complete"
    assert score.points == 0


def test_golden_boost_multiplies_exact_score():
    score = score_match(guess(2, 1, "golden"), result(2, 1), CONFIG)

    assert score.base_points == 2
    assert score.boost_multiplier == 3.0
    assert score.points == 6
    assert score.breakdown == ["Exact Score (+2)", "Golden Boost (x3)"]


def test_silver_boost_multiplies_outcome():
    score = score_match(guess(1, 0, "silver"), result(2, 0), CONFIG)

    assert score.points == 2
    assert score.breakdown == ["Correct Outcome (+1)", "Silver Boost (x2)"]


def test_boost_on_miss_is_zero():
    assert score_match(guess(0, 1, "golden"), result(1, 0), CONFIG).points == 0


def test_playoff_exact_with_right_penalty_winner():
    score = score_match(
        guess(1, 1, home_penalty_winner=True),
        result(1, 1, home_penalty_score=4, away_penalty_score=2),
        CONFIG,
        is_playoff=True
    )

    assert score.kind == "exact"
    assert score.points == 2


def test_playoff_exact_with_wrong_penalty_winner():
    score = score_match(
        guess(1, 1, away_penalty_winner=True),
        result(1, 1, home_penalty_score=4, away_penalty_score=2),
        CONFIG,
        is_playoff=True
    )

    assert score.kind == "miss"


def test_playoff_outright_winner_that_won_on_penalties():
    score = score_match(
        guess(2, 1),
        result(1, 1, home_penalty_score=5, away_penalty_score=3),
        CONFIG,
        is_playoff=True
    )

    assert score.kind == "outcome"


def test_playoff_penalty_pick_that_won_outright():
    score = score_match(guess(0, 0, away_penalty_winner=True), result(0, 2), CONFIG, is_playoff=True)

    assert score.kind == "outcome"


def test_group_draw_ignores_penalty_picks():
    score = score_match(guess(1, 1, away_penalty_winner=True), result(1, 1), CONFIG)

    assert score.kind == "exact"


def test_score_guesses_for_match(session, tournament, users, make_group, add_result, add_guess):
    _, _, matches = make_group(tournament)
    match = matches[0]
    exact = add_guess(users[0], match, 2, 0, boost_type="golden")
    outcome = add_guess(users[1], match, 1, 0)
    miss = add_guess(users[2], match, 0, 0)

    result_ = add_result(match, 2, 0)
    assert score_guesses_for_match(session, match) == 3

    for item in (exact, outcome, miss):
        session.refresh(item)
    assert (exact.score, exact.boost_multiplier, exact.final_score, exact.score_kind) == (2, 3.0, 6, "exact")
    assert (outcome.final_score, outcome.score_kind) == (1, "outcome")
    assert (miss.final_score, miss.score_kind) == (0, "miss")

    # Reverting to draft clears stored points
    result_.is_draft = True
    session.add(result_)
    session.commit()
    score_guesses_for_match(session, match)

    session.refresh(exact)
    assert exact.score is None
    assert exact.final_score is None
    assert exact.score_kind is None


def test_recommended_scoring_values(session, tournament):
    session.add_all([
        Match(tournament_id=tournament.id, match_number=i, stage="group" if i <= 8 else "playoff")
        for i in range(1, 11)
    ])
    session.commit()

    values = get_recommended_scoring_values(session, tournament.id)

    assert values["champion_points"] == 10
    assert values["max_silver_games"] == 3
    assert values["max_golden_games"] == 1
    assert "10 total games (8 group, 2 playoff)" in values["rationale"]
