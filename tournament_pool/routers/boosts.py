from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlmodel import Session

from ..database import get_session
from ..exceptions import BoostError, GuessNotFound, MatchNotFound, TournamentNotFound
from ..schemas import BoostCounts
from ..services.boosts import get_boost_counts, set_boost

router = APIRouter(prefix="/api", tags=["boosts"])


class BoostUpdate(BaseModel):
    """Schema for setting or clearing a boost on a guess."""
    user_id: int
    boost_type: Optional[str] = None


class BoostResponse(BaseModel):
    match_id: int
    user_id: int
    boost_type: Optional[str] = None


@router.get("/tournaments/{tournament_id}/users/{user_id}/boosts", response_model=BoostCounts)
async def get_user_boosts(
    tournament_id: int,
    user_id: int,
    db: Session = Depends(get_session)
):
    """Boosts used so far and the caps for the tournament."""
    try:
        return get_boost_counts(db, user_id, tournament_id)
    except TournamentNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put("/matches/{match_id}/boost", response_model=BoostResponse)
async def update_boost(
    match_id: int,
    payload: BoostUpdate,
    db: Session = Depends(get_session)
):
    try:
        guess = set_boost(db, payload.user_id, match_id, payload.boost_type)
    except (MatchNotFound, GuessNotFound, TournamentNotFound) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except BoostError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return BoostResponse(match_id=guess.match_id, user_id=guess.user_id, boost_type=guess.boost_type)
