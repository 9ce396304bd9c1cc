from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from ..database import get_session
from ..models.team import TournamentGroup
from ..schemas import GroupStandingsRow
from ..services.standings import calculate_group_standings

router = APIRouter(prefix="/api/tournaments", tags=["standings"])


@router.get("/{tournament_id}/groups/{group_id}/standings", response_model=List[GroupStandingsRow])
async def get_group_standings(
    tournament_id: int,
    group_id: int,
    user_id: Optional[int] = None,
    db: Session = Depends(get_session)
):
    """Group table from actual results, or from a user's guesses when user_id is given."""
    group = db.get(TournamentGroup, group_id)
    if not group or group.tournament_id != tournament_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found"
        )

    return calculate_group_standings(db, group_id, user_id)
