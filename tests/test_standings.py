from itertools import permutations

from tournament_pool.schemas import GameScore
from tournament_pool.services.standings import (
    calculate_group_standings,
    compute_standings,
    has_score,
)


def game(home, away, home_score, away_score):
    return GameScore(home_team_id=home, away_team_id=away, home_score=home_score, away_score=away_score)


def test_round_robin_table():
    # A=1, B=2, C=3, D=4
    games = [
        game(1, 2, 1, 1),
        game(1, 3, 2, 0),
        game(1, 4, 2, 0),
        game(2, 3, 1, 1),
        game(2, 4, 1, 0),
        game(3, 4, 0, 1),
    ]
    standings = compute_standings([1, 2, 3, 4], games)

    assert [row.team_id for row in standings] == [1, 2, 4, 3]
    assert [row.points for row in standings] == [7, 5, 3, 1]
    assert [row.position for row in standings] == [1, 2, 3, 4]

    leader = standings[0]
    assert (leader.played, leader.won, leader.drawn, leader.lost) == (3, 2, 1, 0)
    assert (leader.goals_for, leader.goals_against, leader.goal_difference) == (5, 1, 4)


def test_tie_on_points_broken_by_goal_difference():
    games = [
        game(1, 2, 0, 0),
        game(1, 3, 1, 0),
        game(2, 3, 3, 0),
    ]
    standings = compute_standings([1, 2, 3], games)

    assert [row.team_id for row in standings] == [2, 1, 3]
    assert standings[0].points == standings[1].points == 4


def test_tie_on_goal_difference_broken_by_goals_for():
    games = [
        game(1, 3, 1, 0),
        game(2, 3, 3, 2),
    ]
    standings = compute_standings([1, 2, 3], games)

    assert [row.team_id for row in standings] == [2, 1, 3]


def test_full_tie_keeps_input_order():
    standings = compute_standings([4, 2, 3, 1], [game(4, 2, 1, 1), game(3, 1, 1, 1)])

    assert [row.team_id for row in standings] == [4, 2, 3, 1]
    assert all(row.points == 1 for row in standings)


def test_unplayed_and_invalid_scores_are_ignored():
    games = [
        game(1, 2, None, None),
        game(1, 3, 2, None),
        game(2, 3, "2", "1"),
        game(3, 4, True, False),
        game(1, 4, 0, 0),
    ]
    standings = {row.team_id: row for row in compute_standings([1, 2, 3, 4], games)}

    assert standings[1].played == 1
    assert standings[1].drawn == 1
    assert standings[4].played == 1
    assert standings[2].played == 0
    assert standings[3].played == 0


def test_teams_without_games_are_listed():
    standings = compute_standings([7, 8], [])

    assert [row.team_id for row in standings] == [7, 8]
    assert all(row.played == 0 and row.points == 0 for row in standings)


def test_has_score():
    assert has_score(0)
    assert has_score(3)
    assert not has_score(None)
    assert not has_score("1")
    assert not has_score(True)
    assert not has_score(1.0)


def test_head_to_head_ordering():
    games = [
        game(1, 2, 0, 1),
        game(1, 3, 5, 0),
        game(1, 4, 1, 0),
        game(2, 3, 0, 1),
        game(2, 4, 1, 0),
        game(3, 4, 0, 0),
    ]

    overall = compute_standings([1, 2, 3, 4], games)
    assert [row.team_id for row in overall] == [1, 2, 3, 4]

    # 1 and 2 both have 6 points; 2 won the game between them
    head_to_head = compute_standings([1, 2, 3, 4], games, head_to_head=True)
    assert [row.team_id for row in head_to_head] == [2, 1, 3, 4]
    assert [row.position for row in head_to_head] == [1, 2, 3, 4]


def test_head_to_head_all_level_uses_overall_stats():
    games = [
        game(1, 2, 2, 2),
        game(1, 3, 0, 0),
        game(2, 3, 1, 1),
    ]
    standings = compute_standings([1, 2, 3], games, head_to_head=True)

    assert [row.team_id for row in standings] == [2, 1, 3]


def test_group_standings_from_results(session, tournament, make_group, add_result):
    group, teams, matches = make_group(tournament)
    add_result(matches[0], 2, 0)
    add_result(matches[1], 1, 1, is_draft=True)

    standings = calculate_group_standings(session, group.id)

    assert standings[0].team_id == teams[0].id
    assert standings[0].points == 3
    assert standings[0].played == 1
    # Draft result does not count
    assert {row.team_id: row.played for row in standings}[teams[2].id] == 0


def test_group_standings_from_user_guesses(session, tournament, users, make_group, add_result, add_guess):
    group, teams, matches = make_group(tournament)
    add_result(matches[0], 2, 0)
    add_guess(users[0], matches[0], 0, 3)
    add_guess(users[0], matches[3], 1, 0)

    standings = calculate_group_standings(session, group.id, user_id=users[0].id)

    assert standings[0].team_id == teams[1].id
    assert standings[0].points == 6
    assert standings[0].goals_for == 4


def test_group_standings_unknown_group(session):
    assert calculate_group_standings(session, 999) == []


def test_distinct_stats_give_one_order_for_every_input_order():
    games = [
        game(1, 2, 2, 0),
        game(1, 3, 1, 1),
        game(2, 3, 3, 1),
        game(3, 4, 0, 2),
        game(2, 4, 2, 1),
        game(1, 4, 0, 0),
    ]
    expected = [2, 1, 4, 3]

    for team_ids in permutations([1, 2, 3, 4]):
        standings = compute_standings(list(team_ids), games)
        assert [row.team_id for row in standings] == expected
