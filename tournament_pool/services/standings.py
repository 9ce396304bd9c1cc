from itertools import groupby
from typing import Dict, Iterable, List, NamedTuple, Optional
from sqlmodel import Session, select

from ..models.match import Match, MatchResult
from ..models.match_guess import MatchGuess
from ..models.team import TournamentGroup, TournamentGroupTeam
from ..models.tournament import Tournament
from ..schemas import GameScore, GroupStandingsRow


class GroupTable(NamedTuple):
    group: TournamentGroup
    standings: List[GroupStandingsRow]
    is_complete: bool


def has_score(value) -> bool:
    """Only real integers count as a score; 0 is valid, None/strings/bools are not."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_game_complete(game: GameScore) -> bool:
    return has_score(game.home_score) and has_score(game.away_score)


def _stats_key(row: GroupStandingsRow) -> tuple:
    return (row.points, row.goal_difference, row.goals_for)


def _accumulate(team_ids: Iterable[int], games: Iterable[GameScore]) -> Dict[int, GroupStandingsRow]:
    stats: Dict[int, GroupStandingsRow] = {
        team_id: GroupStandingsRow(team_id=team_id) for team_id in team_ids
    }

    for game in games:
        if not is_game_complete(game):
            continue
        if game.home_team_id not in stats or game.away_team_id not in stats:
            continue

        home = stats[game.home_team_id]
        away = stats[game.away_team_id]

        home.played += 1
        away.played += 1

        home.goals_for += game.home_score
        home.goals_against += game.away_score
        away.goals_for += game.away_score
        away.goals_against += game.home_score

        if game.home_score > game.away_score:
            home.won += 1
            home.points += 3
            away.lost += 1
        elif game.away_score > game.home_score:
            away.won += 1
            away.points += 3
            home.lost += 1
        else:
            home.drawn += 1
            away.drawn += 1
            home.points += 1
            away.points += 1

    return stats


def _sort_by_head_to_head(rows: List[GroupStandingsRow], games: List[GameScore]) -> List[GroupStandingsRow]:
    """Points first, then the mini-table of games between the tied teams, then overall stats."""
    by_points = sorted(rows, key=lambda r: r.points, reverse=True)

    # Everybody level on points: the mini-table is the whole table
    if len(by_points) > 1 and by_points[0].points == by_points[-1].points:
        return sorted(rows, key=_stats_key, reverse=True)

    ordered: List[GroupStandingsRow] = []
    for _, tied_rows in groupby(by_points, key=lambda r: r.points):
        tied = list(tied_rows)
        if len(tied) > 1:
            tied_ids = {r.team_id for r in tied}
            tied_games = [
                g for g in games
                if g.home_team_id in tied_ids and g.away_team_id in tied_ids
            ]
            mini = _accumulate([r.team_id for r in tied], tied_games)
            tied.sort(key=lambda r: (_stats_key(mini[r.team_id]), _stats_key(r)), reverse=True)
        ordered.extend(tied)
    return ordered


def compute_standings(
    team_ids: List[int],
    games: List[GameScore],
    head_to_head: Optional[bool] = False
) -> List[GroupStandingsRow]:
    """
    Build a group table from a list of games.

    Games without two integer scores contribute nothing. Teams are sorted by
    Points > Goal Diff > Goals For; remaining ties keep the order of team_ids.
    With head_to_head, teams level on points are separated by the games they
    played against each other before falling back to overall stats.
    """
    rows = list(_accumulate(team_ids, games).values())

    if head_to_head:
        rows = _sort_by_head_to_head(rows, games)
    else:
        rows.sort(key=_stats_key, reverse=True)

    for i, row in enumerate(rows):
        row.position = i + 1

    return rows


def games_from_results(matches: List[Match], results_by_match: Dict[int, MatchResult]) -> List[GameScore]:
    games = []
    for match in matches:
        result = results_by_match.get(match.id)
        games.append(GameScore(
            home_team_id=match.home_team_id,
            away_team_id=match.away_team_id,
            home_score=result.home_score if result else None,
            away_score=result.away_score if result else None,
        ))
    return games


def games_from_guesses(matches: List[Match], guesses_by_match: Dict[int, MatchGuess]) -> List[GameScore]:
    games = []
    for match in matches:
        guess = guesses_by_match.get(match.id)
        games.append(GameScore(
            home_team_id=match.home_team_id,
            away_team_id=match.away_team_id,
            home_score=guess.home_score if guess else None,
            away_score=guess.away_score if guess else None,
        ))
    return games


def is_group_complete(matches: List[Match], results_by_match: Dict[int, MatchResult]) -> bool:
    """A group is complete when every one of its matches has an authoritative result."""
    if not matches:
        return False
    return all(is_game_complete(game) for game in games_from_results(matches, results_by_match))


def get_group_matches(db: Session, group_id: int) -> List[Match]:
    statement = select(Match).where(
        Match.group_id == group_id,
        Match.stage == "group"
    ).order_by(Match.match_number)
    return list(db.exec(statement).all())


def get_group_team_ids(db: Session, group_id: int) -> List[int]:
    statement = select(TournamentGroupTeam).where(
        TournamentGroupTeam.group_id == group_id
    ).order_by(TournamentGroupTeam.id)
    return [membership.team_id for membership in db.exec(statement).all()]


def get_results_by_match(
    db: Session,
    match_ids: List[int],
    include_drafts: bool = False
) -> Dict[int, MatchResult]:
    if not match_ids:
        return {}
    statement = select(MatchResult).where(MatchResult.match_id.in_(match_ids))
    if not include_drafts:
        statement = statement.where(MatchResult.is_draft == False)  # noqa: E712
    return {result.match_id: result for result in db.exec(statement).all()}


def get_guesses_by_match(db: Session, user_id: int, match_ids: List[int]) -> Dict[int, MatchGuess]:
    if not match_ids:
        return {}
    statement = select(MatchGuess).where(
        MatchGuess.user_id == user_id,
        MatchGuess.match_id.in_(match_ids)
    )
    return {guess.match_id: guess for guess in db.exec(statement).all()}


def _uses_head_to_head(db: Session, tournament_id: int) -> bool:
    tournament = db.get(Tournament, tournament_id)
    return bool(tournament and tournament.sort_by_games_between_teams)


def calculate_group_standings(
    db: Session,
    group_id: int,
    user_id: Optional[int] = None
) -> List[GroupStandingsRow]:
    """
    Calculate a group table from actual results, or from a user's guesses
    when user_id is given.
    """
    group = db.get(TournamentGroup, group_id)
    if not group:
        return []

    matches = get_group_matches(db, group_id)
    team_ids = get_group_team_ids(db, group_id)
    match_ids = [m.id for m in matches]

    if user_id is None:
        games = games_from_results(matches, get_results_by_match(db, match_ids))
    else:
        games = games_from_guesses(matches, get_guesses_by_match(db, user_id, match_ids))

    return compute_standings(team_ids, games, _uses_head_to_head(db, group.tournament_id))


def calculate_actual_group_tables(db: Session, tournament_id: int) -> List[GroupTable]:
    """Actual standings and completeness for every group of a tournament, by group letter."""
    groups = db.exec(
        select(TournamentGroup)
        .where(TournamentGroup.tournament_id == tournament_id)
        .order_by(TournamentGroup.group_letter)
    ).all()
    head_to_head = _uses_head_to_head(db, tournament_id)

    tables = []
    for group in groups:
        matches = get_group_matches(db, group.id)
        results = get_results_by_match(db, [m.id for m in matches])
        standings = compute_standings(
            get_group_team_ids(db, group.id),
            games_from_results(matches, results),
            head_to_head
        )
        tables.append(GroupTable(group, standings, is_group_complete(matches, results)))

    return tables
