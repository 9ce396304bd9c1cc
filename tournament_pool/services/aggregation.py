"""
Materialized score rows: one denormalized TournamentScore per user per tournament.

recalculate() is a pure re-projection of the current per-match statistics and
tournament-wide predictions, so running it twice with unchanged inputs leaves
the stored row untouched. The "yesterday" snapshot is carried over from the
existing row and only moves when snapshot_yesterday_scores() runs.
"""

import logging
from datetime import datetime, UTC
from typing import Dict, List, Optional
from sqlalchemy import case
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from ..exceptions import TournamentNotFound
from ..models.match import Match
from ..models.match_guess import MatchGuess
from ..models.prediction import OutcomePrediction, QualificationPrediction
from ..models.tournament import Tournament
from ..models.tournament_score import TournamentScore
from ..schemas import GameStatistics
from .outcomes import get_outcome_prediction, score_outcomes
from .qualification import (
    QualificationContext,
    calculate_qualified_teams_score,
    load_qualification_context,
)

logger = logging.getLogger(__name__)

# Every numeric field read from the per-match statistics query.
# Missing values (no scored guesses, NULL sums) are stored as 0.
STATISTIC_FIELDS = (
    "total_game_score",
    "group_stage_game_score",
    "playoff_stage_game_score",
    "total_boost_bonus",
    "group_stage_boost_bonus",
    "playoff_stage_boost_bonus",
    "total_correct_guesses",
    "total_exact_guesses",
    "group_correct_guesses",
    "group_exact_guesses",
    "playoff_correct_guesses",
    "playoff_exact_guesses",
)

PREDICTION_FIELDS = (
    "qualified_teams_score",
    "honor_roll_score",
    "individual_awards_score",
)

SCORE_FIELDS = STATISTIC_FIELDS + PREDICTION_FIELDS + ("total_score",)


def get_game_statistics_for_users(
    db: Session,
    user_ids: List[int],
    tournament_id: int
) -> Dict[int, GameStatistics]:
    """
    Sum stored per-match scores for a set of users, split by stage.

    Users without any guess in the tournament are absent from the result.
    """
    is_group = Match.stage == "group"
    is_correct = MatchGuess.score_kind.in_(("exact", "outcome"))
    is_exact = MatchGuess.score_kind == "exact"
    boost_bonus = case(
        (MatchGuess.final_score.is_not(None),
         func.coalesce(MatchGuess.final_score, 0) - func.coalesce(MatchGuess.score, 0)),
        else_=0
    )

    statement = (
        select(
            MatchGuess.user_id,
            func.sum(MatchGuess.score).label("total_game_score"),
            func.sum(case((is_group, MatchGuess.score), else_=0)).label("group_stage_game_score"),
            func.sum(case((is_group, 0), else_=MatchGuess.score)).label("playoff_stage_game_score"),
            func.sum(boost_bonus).label("total_boost_bonus"),
            func.sum(case((is_group, boost_bonus), else_=0)).label("group_stage_boost_bonus"),
            func.sum(case((is_group, 0), else_=boost_bonus)).label("playoff_stage_boost_bonus"),
            func.sum(case((is_correct, 1), else_=0)).label("total_correct_guesses"),
            func.sum(case((is_exact, 1), else_=0)).label("total_exact_guesses"),
            func.sum(case((is_group & is_correct, 1), else_=0)).label("group_correct_guesses"),
            func.sum(case((is_group & is_exact, 1), else_=0)).label("group_exact_guesses"),
            func.sum(case((~is_group & is_correct, 1), else_=0)).label("playoff_correct_guesses"),
            func.sum(case((~is_group & is_exact, 1), else_=0)).label("playoff_exact_guesses"),
        )
        .join(Match, Match.id == MatchGuess.match_id)
        .where(
            MatchGuess.user_id.in_(user_ids),
            Match.tournament_id == tournament_id
        )
        .group_by(MatchGuess.user_id)
    )

    return {
        row.user_id: GameStatistics(**row._mapping)
        for row in db.exec(statement).all()
    }


def coalesce_statistics(statistics: Optional[GameStatistics]) -> Dict[str, int]:
    """Replace every missing statistic with 0."""
    return {
        field: int(getattr(statistics, field, None) or 0)
        for field in STATISTIC_FIELDS
    }


def find_tournament_score(db: Session, user_id: int, tournament_id: int) -> Optional[TournamentScore]:
    return db.exec(
        select(TournamentScore).where(
            TournamentScore.user_id == user_id,
            TournamentScore.tournament_id == tournament_id
        )
    ).first()


def project_user_scores(
    db: Session,
    user_id: int,
    tournament: Tournament,
    statistics: Optional[GameStatistics],
    context: QualificationContext
) -> Dict[str, int]:
    """All score fields of a user's materialized row, computed from current data."""
    values = coalesce_statistics(statistics)

    qualification = calculate_qualified_teams_score(db, user_id, tournament.id, context)
    outcomes = score_outcomes(
        get_outcome_prediction(db, user_id, tournament.id),
        tournament.actual_outcomes(),
        context.config
    )

    values["qualified_teams_score"] = qualification.total_score
    values["honor_roll_score"] = outcomes.honor_roll_score
    values["individual_awards_score"] = outcomes.individual_awards_score
    values["total_score"] = (
        values["total_game_score"]
        + values["total_boost_bonus"]
        + values["qualified_teams_score"]
        + values["honor_roll_score"]
        + values["individual_awards_score"]
    )
    return values


def _apply_values(row: TournamentScore, values: Dict[str, int]) -> bool:
    changed = False
    for field, value in values.items():
        if getattr(row, field) != value:
            setattr(row, field, value)
            changed = True
    return changed


def recalculate(db: Session, user_ids: List[int], tournament_id: int) -> List[TournamentScore]:
    """
    Recompute and upsert the materialized score row of each user.

    Users are processed one at a time, each in its own transaction. When the
    row has to be created and the insert fails (another job created it
    first), the user is intentionally skipped rather than retried as an
    update: it is logged, left out of the returned rows, and materialized
    again by the next run.

    Args:
        db: Database session
        user_ids: Users to materialize, processed in the given order
        tournament_id: Tournament ID

    Returns:
        The stored rows of every user that was materialized
    """
    if not user_ids:
        return []

    tournament = db.get(Tournament, tournament_id)
    if not tournament:
        raise TournamentNotFound(f"Tournament {tournament_id} not found")

    statistics = get_game_statistics_for_users(db, user_ids, tournament_id)
    context = load_qualification_context(db, tournament)

    rows = []
    for user_id in user_ids:
        values = project_user_scores(db, user_id, tournament, statistics.get(user_id), context)

        row = find_tournament_score(db, user_id, tournament_id)
        if row is None:
            row = TournamentScore(user_id=user_id, tournament_id=tournament_id)
            db.add(row)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning(
                    "Score row for user %s in tournament %s was created concurrently, "
                    "skipping until the next recalculation",
                    user_id, tournament_id
                )
                continue
            db.refresh(row)

        if _apply_values(row, values) or row.last_score_update_at is None:
            row.last_score_update_at = datetime.now(UTC)
            db.add(row)
            db.commit()
            db.refresh(row)

        rows.append(row)

    logger.info(
        "Materialized %d of %d users for tournament %s",
        len(rows), len(user_ids), tournament_id
    )
    return rows


def get_participant_ids(db: Session, tournament_id: int) -> List[int]:
    """
    Every user with something to score in a tournament: a match guess, a
    qualification or outcome prediction, or an existing score row.
    """
    statements = [
        select(MatchGuess.user_id)
        .join(Match, Match.id == MatchGuess.match_id)
        .where(Match.tournament_id == tournament_id),
        select(QualificationPrediction.user_id)
        .where(QualificationPrediction.tournament_id == tournament_id),
        select(OutcomePrediction.user_id)
        .where(OutcomePrediction.tournament_id == tournament_id),
        select(TournamentScore.user_id)
        .where(TournamentScore.tournament_id == tournament_id),
    ]
    user_ids = set()
    for statement in statements:
        user_ids.update(db.exec(statement.distinct()).all())
    return sorted(user_ids)


def recalculate_tournament(db: Session, tournament_id: int) -> List[TournamentScore]:
    """Materialize every participant of the tournament."""
    return recalculate(db, get_participant_ids(db, tournament_id), tournament_id)


def snapshot_yesterday_scores(db: Session, tournament_id: int) -> int:
    """
    Copy current totals into the "yesterday" fields (run once a day).

    Returns:
        Number of rows updated
    """
    rows = db.exec(
        select(TournamentScore).where(TournamentScore.tournament_id == tournament_id)
    ).all()
    for row in rows:
        row.yesterday_total_score = row.total_score
        row.yesterday_boost_bonus = row.total_boost_bonus
        db.add(row)
    db.commit()
    return len(rows)


def validate_materialized_scores(
    db: Session,
    tournament_id: int,
    user_ids: Optional[List[int]] = None
) -> List[dict]:
    """
    Compare stored rows against a fresh projection without writing anything.

    Returns:
        One entry per mismatching field: user_id, field, materialized, expected
    """
    tournament = db.get(Tournament, tournament_id)
    if not tournament:
        raise TournamentNotFound(f"Tournament {tournament_id} not found")

    statement = select(TournamentScore).where(TournamentScore.tournament_id == tournament_id)
    if user_ids is not None:
        statement = statement.where(TournamentScore.user_id.in_(user_ids))
    rows = db.exec(statement.order_by(TournamentScore.user_id)).all()
    if not rows:
        return []

    statistics = get_game_statistics_for_users(db, [row.user_id for row in rows], tournament_id)
    context = load_qualification_context(db, tournament)

    mismatches = []
    for row in rows:
        expected = project_user_scores(db, row.user_id, tournament, statistics.get(row.user_id), context)
        for field in SCORE_FIELDS:
            if getattr(row, field) != expected[field]:
                mismatches.append({
                    "user_id": row.user_id,
                    "field": field,
                    "materialized": getattr(row, field),
                    "expected": expected[field],
                })
    return mismatches
