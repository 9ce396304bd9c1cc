import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlmodel import Session

from ..database import get_session
from ..exceptions import TournamentNotFound
from ..models.match import Match
from ..models.tournament import Tournament
from ..schemas import LeaderboardEntry, OutcomeScore, QualificationScore
from ..services.aggregation import recalculate, snapshot_yesterday_scores
from ..services.leaderboard import get_leaderboard
from ..services.outcomes import calculate_outcome_score
from ..services.qualification import calculate_qualified_teams_score
from ..services.scoring import get_recommended_scoring_values, score_guesses_for_match

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["scores"])


class RecalculateRequest(BaseModel):
    """Users whose materialized scores should be rebuilt."""
    user_ids: List[int]


class RecalculateResponse(BaseModel):
    tournament_id: int
    requested: int
    updated_user_ids: List[int]


def _not_found(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/tournaments/{tournament_id}/users/{user_id}/qualification", response_model=QualificationScore)
async def get_qualification_score(
    tournament_id: int,
    user_id: int,
    db: Session = Depends(get_session)
):
    try:
        return calculate_qualified_teams_score(db, user_id, tournament_id)
    except TournamentNotFound as e:
        raise _not_found(e)


@router.get("/tournaments/{tournament_id}/users/{user_id}/outcomes", response_model=OutcomeScore)
async def get_outcome_score(
    tournament_id: int,
    user_id: int,
    db: Session = Depends(get_session)
):
    try:
        return calculate_outcome_score(db, user_id, tournament_id)
    except TournamentNotFound as e:
        raise _not_found(e)


@router.post("/tournaments/{tournament_id}/recalculate", response_model=RecalculateResponse)
async def recalculate_scores(
    tournament_id: int,
    payload: RecalculateRequest,
    db: Session = Depends(get_session)
):
    """Rebuild the materialized score rows of the given users."""
    try:
        rows = recalculate(db, payload.user_ids, tournament_id)
    except TournamentNotFound as e:
        raise _not_found(e)

    return RecalculateResponse(
        tournament_id=tournament_id,
        requested=len(payload.user_ids),
        updated_user_ids=[row.user_id for row in rows],
    )


@router.post("/matches/{match_id}/score")
async def score_match_guesses(
    match_id: int,
    db: Session = Depends(get_session)
):
    """Re-score every guess on a match after its result changed."""
    match = db.get(Match, match_id)
    if not match:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Match not found"
        )

    try:
        updated = score_guesses_for_match(db, match)
    except TournamentNotFound as e:
        raise _not_found(e)

    return {"match_id": match_id, "guesses_scored": updated}


@router.get("/tournaments/{tournament_id}/leaderboard", response_model=List[LeaderboardEntry])
async def leaderboard(
    tournament_id: int,
    db: Session = Depends(get_session)
):
    try:
        return get_leaderboard(db, tournament_id)
    except TournamentNotFound as e:
        raise _not_found(e)


@router.post("/tournaments/{tournament_id}/snapshot")
async def snapshot_scores(
    tournament_id: int,
    db: Session = Depends(get_session)
):
    """Daily job: remember current totals for tomorrow's rank changes."""
    updated = snapshot_yesterday_scores(db, tournament_id)
    logger.info("Snapshot of %d score rows for tournament %s", updated, tournament_id)
    return {"tournament_id": tournament_id, "rows_updated": updated}


@router.get("/tournaments/{tournament_id}/recommended-scoring")
async def recommended_scoring(
    tournament_id: int,
    db: Session = Depends(get_session)
):
    """Suggested point weights and boost caps for tournament admins."""
    if not db.get(Tournament, tournament_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tournament not found"
        )
    return get_recommended_scoring_values(db, tournament_id)
