import logging
from datetime import datetime, UTC
from typing import Optional, Tuple
from sqlmodel import Session, select

from ..config import BOOST_MULTIPLIERS
from ..exceptions import TournamentNotFound
from ..models.match import Match, MatchResult
from ..models.match_guess import MatchGuess
from ..models.tournament import Tournament
from ..schemas import MatchScore, TournamentConfig
from .standings import has_score

logger = logging.getLogger(__name__)


def get_outcome(home_score: int, away_score: int) -> str:
    if home_score > away_score:
        return "home_win"
    elif home_score < away_score:
        return "away_win"
    return "draw"


def get_boost_multiplier(boost_type: Optional[str]) -> float:
    return BOOST_MULTIPLIERS.get(boost_type, 1.0) if boost_type else 1.0


def calculate_base_points(
    guess: MatchGuess,
    result: MatchResult,
    config: TournamentConfig,
    is_playoff: bool = False
) -> Tuple[str, int]:
    """
    Base points for a guess against an authoritative result.

    Scoring:
    - Exact score: game_exact_score_points
    - Correct outcome (win/draw/loss): game_correct_outcome_points
    - Playoff level after extra time: the penalty winner must also be right
      for an exact or outcome hit; picking the eventual winner outright, or a
      level score with the right penalty winner, is worth outcome points.

    Returns:
        (kind, points) where kind is "exact", "outcome" or "miss"
    """
    if not (has_score(guess.home_score) and has_score(guess.away_score)):
        return "miss", 0

    actual_outcome = get_outcome(result.home_score, result.away_score)
    predicted_outcome = get_outcome(guess.home_score, guess.away_score)

    penalty_winner = result.penalty_winner if is_playoff and actual_outcome == "draw" else None
    picked_penalty_winner = (
        (penalty_winner == "home" and guess.home_penalty_winner) or
        (penalty_winner == "away" and guess.away_penalty_winner)
    )
    wrong_penalty_pick = penalty_winner is not None and not picked_penalty_winner

    if guess.home_score == result.home_score and guess.away_score == result.away_score:
        if wrong_penalty_pick:
            return "miss", 0
        return "exact", config.game_exact_score_points

    if predicted_outcome == actual_outcome:
        if wrong_penalty_pick:
            return "miss", 0
        return "outcome", config.game_correct_outcome_points

    if penalty_winner is not None:
        # Match went to penalties, guess had the eventual winner winning outright
        if (penalty_winner == "home" and predicted_outcome == "home_win") or \
                (penalty_winner == "away" and predicted_outcome == "away_win"):
            return "outcome", config.game_correct_outcome_points

    if is_playoff and predicted_outcome == "draw":
        # Guess went to penalties, match was won outright by the picked side
        if (guess.home_penalty_winner and actual_outcome == "home_win") or \
                (guess.away_penalty_winner and actual_outcome == "away_win"):
            return "outcome", config.game_correct_outcome_points

    return "miss", 0


def score_match(
    guess: MatchGuess,
    result: Optional[MatchResult],
    config: TournamentConfig,
    is_playoff: bool = False
) -> MatchScore:
    """
    Score one guess. Pending while the match has no authoritative result.

    A stored boost always multiplies the base points; boosts can only be
    stored before the match has a result (see services.boosts).
    """
    if result is None or result.is_draft or not (
        has_score(result.home_score) and has_score(result.away_score)
    ):
        return MatchScore(status="pending")

    kind, base_points = calculate_base_points(guess, result, config, is_playoff)
    multiplier = get_boost_multiplier(guess.boost_type)

    breakdown = []
    if kind == "exact":
        breakdown.append(f"Exact Score (+{base_points})")
    elif kind == "outcome":
        breakdown.append(f"Correct Outcome (+{base_points})")
    if guess.boost_type and multiplier != 1.0:
        breakdown.append(f"{guess.boost_type.capitalize()} Boost (x{multiplier:g})")

    return MatchScore(
        status="complete",
        kind=kind,
        base_points=base_points,
        boost_multiplier=multiplier,
        points=int(round(base_points * multiplier)),
        breakdown=breakdown,
    )


def score_guesses_for_match(db: Session, match: Match) -> int:
    """
    Calculate and store points for all guesses on a match.
    Called after a result is entered, edited, or reverted to draft.

    Returns:
        Number of guesses updated
    """
    tournament = db.get(Tournament, match.tournament_id)
    if not tournament:
        raise TournamentNotFound(f"Tournament {match.tournament_id} not found")
    config = tournament.scoring_config()

    result = db.exec(select(MatchResult).where(MatchResult.match_id == match.id)).first()
    guesses = db.exec(select(MatchGuess).where(MatchGuess.match_id == match.id)).all()

    now = datetime.now(UTC)
    for guess in guesses:
        match_score = score_match(guess, result, config, match.is_playoff)
        if match_score.status == "pending":
            guess.score = None
            guess.boost_multiplier = None
            guess.final_score = None
            guess.score_kind = None
        else:
            guess.score = match_score.base_points
            guess.boost_multiplier = match_score.boost_multiplier
            guess.final_score = match_score.points
            guess.score_kind = match_score.kind
        guess.updated_at = now
        db.add(guess)

    db.commit()
    logger.info("Scored %d guesses for match %s", len(guesses), match.id)
    return len(guesses)


def score_guesses_for_tournament(db: Session, tournament_id: int) -> int:
    """Re-score every match of a tournament."""
    matches = db.exec(
        select(Match).where(Match.tournament_id == tournament_id).order_by(Match.match_number)
    ).all()
    return sum(score_guesses_for_match(db, match) for match in matches)


def get_recommended_scoring_values(db: Session, tournament_id: int) -> dict:
    """
    Suggest point weights from the number of matches in a tournament.

    Tournament-wide awards are scaled to roughly 5-13% of the points an
    average user earns from match predictions (~0.75 points per match).
    """
    matches = db.exec(select(Match).where(Match.tournament_id == tournament_id)).all()
    total_games = len(matches)
    group_games = len([m for m in matches if m.stage == "group"])
    playoff_games = total_games - group_games
    avg_game_points = total_games * 0.75

    return {
        "game_exact_score_points": 2,
        "game_correct_outcome_points": 1,
        "champion_points": max(10, round(avg_game_points * 0.13)),
        "runner_up_points": max(6, round(avg_game_points * 0.08)),
        "third_place_points": max(4, round(avg_game_points * 0.05)),
        "individual_award_points": max(5, round(avg_game_points * 0.07)),
        "qualified_team_points": 1,
        "exact_position_qualified_points": 2,
        "max_silver_games": max(3, round(total_games * 0.10)),
        "max_golden_games": max(1, round(total_games * 0.03)),
        "rationale": (
            f"Based on {total_games} total games ({group_games} group, {playoff_games} playoff)."
        ),
    }
