"""
Boost ledger: per-user, per-tournament caps on silver (x2) and golden (x3) boosts.

Counts always come from stored guesses across the whole tournament, never
from whatever subset of matches a client happens to be showing.
"""

import logging
from datetime import datetime, UTC
from typing import Dict, Optional
from sqlmodel import Session, select

from ..exceptions import (
    BoostLimitReached,
    BoostLocked,
    GuessNotFound,
    InvalidBoostType,
    MatchNotFound,
    TournamentNotFound,
)
from ..models.match import Match, MatchResult
from ..models.match_guess import MatchGuess
from ..models.tournament import Tournament
from ..schemas import BoostCounts
from .standings import has_score

logger = logging.getLogger(__name__)

BOOST_TYPES = ("silver", "golden")


def count_user_boosts_by_type(db: Session, user_id: int, tournament_id: int) -> Dict[str, int]:
    statement = (
        select(MatchGuess.boost_type)
        .join(Match, Match.id == MatchGuess.match_id)
        .where(
            MatchGuess.user_id == user_id,
            Match.tournament_id == tournament_id,
            MatchGuess.boost_type.is_not(None)
        )
    )
    boost_types = list(db.exec(statement).all())
    return {boost_type: boost_types.count(boost_type) for boost_type in BOOST_TYPES}


def get_boost_counts(db: Session, user_id: int, tournament_id: int) -> BoostCounts:
    tournament = db.get(Tournament, tournament_id)
    if not tournament:
        raise TournamentNotFound(f"Tournament {tournament_id} not found")

    config = tournament.scoring_config()
    counts = count_user_boosts_by_type(db, user_id, tournament_id)
    return BoostCounts(
        silver=counts["silver"],
        golden=counts["golden"],
        max_silver=config.max_silver_games,
        max_golden=config.max_golden_games,
    )


def get_boost_cap(db: Session, tournament_id: int, boost_type: str) -> int:
    tournament = db.get(Tournament, tournament_id)
    if not tournament:
        raise TournamentNotFound(f"Tournament {tournament_id} not found")
    return tournament.scoring_config().boost_cap(boost_type)


def count_boosts(
    db: Session,
    user_id: int,
    tournament_id: int,
    boost_type: str,
    exclude_match_id: Optional[int] = None
) -> int:
    """
    Count a user's stored boosts of one type in a tournament.

    The counted guess rows are locked (FOR UPDATE) until the transaction
    ends, so concurrent boost changes for the same user are serialized.
    """
    statement = (
        select(MatchGuess.id)
        .join(Match, Match.id == MatchGuess.match_id)
        .where(
            MatchGuess.user_id == user_id,
            Match.tournament_id == tournament_id,
            MatchGuess.boost_type == boost_type
        )
        .with_for_update(of=MatchGuess)
    )
    if exclude_match_id is not None:
        statement = statement.where(MatchGuess.match_id != exclude_match_id)
    return len(db.exec(statement).all())


def try_assign_boost(
    db: Session,
    user_id: int,
    tournament_id: int,
    boost_type: str,
    match_id: Optional[int] = None
) -> bool:
    """
    Check whether one more boost of this type fits under the tournament cap.

    When match_id is given, a boost already stored on that match is not
    counted, so re-assigning the same type is always allowed and switching
    types only counts against the new type.
    """
    if boost_type not in BOOST_TYPES:
        return False

    cap = get_boost_cap(db, tournament_id, boost_type)
    return count_boosts(db, user_id, tournament_id, boost_type, match_id) < cap


def match_has_result(db: Session, match_id: int) -> bool:
    """Any entered score, draft or not, closes the boost window."""
    result = db.exec(select(MatchResult).where(MatchResult.match_id == match_id)).first()
    return bool(result and has_score(result.home_score) and has_score(result.away_score))


def set_boost(db: Session, user_id: int, match_id: int, boost_type: Optional[str]) -> MatchGuess:
    """
    Set, switch or clear the boost on a user's guess.

    Raises:
        MatchNotFound, GuessNotFound, InvalidBoostType
        BoostLocked: the match already has a result
        BoostLimitReached: the tournament cap for this boost type is used up
    """
    match = db.get(Match, match_id)
    if not match:
        raise MatchNotFound(f"Match {match_id} not found")

    if boost_type is not None and boost_type not in BOOST_TYPES:
        raise InvalidBoostType(f"Unknown boost type: {boost_type}")

    guess = db.exec(
        select(MatchGuess).where(
            MatchGuess.user_id == user_id,
            MatchGuess.match_id == match_id
        )
    ).first()
    if not guess:
        raise GuessNotFound(f"User {user_id} has no guess for match {match_id}")

    if guess.boost_type == boost_type:
        return guess

    if match_has_result(db, match_id):
        raise BoostLocked(f"Match {match_id} already has a result")

    if boost_type and not try_assign_boost(db, user_id, match.tournament_id, boost_type, match_id):
        logger.info(
            "Rejected %s boost for user %s on match %s: limit reached",
            boost_type, user_id, match_id
        )
        raise BoostLimitReached(f"Maximum number of {boost_type} boosts reached")

    guess.boost_type = boost_type
    guess.updated_at = datetime.now(UTC)
    db.add(guess)

    # Re-count inside the same transaction; a concurrent request may have
    # used the last slot between the check above and this write
    if boost_type:
        db.flush()
        cap = get_boost_cap(db, match.tournament_id, boost_type)
        if count_boosts(db, user_id, match.tournament_id, boost_type) > cap:
            db.rollback()
            logger.warning(
                "Rolled back %s boost for user %s on match %s: limit exceeded on re-check",
                boost_type, user_id, match_id
            )
            raise BoostLimitReached(f"Maximum number of {boost_type} boosts reached")

    db.commit()
    db.refresh(guess)
    return guess
