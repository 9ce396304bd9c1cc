from typing import Dict, List, Tuple
from sqlmodel import Session, select

from ..exceptions import TournamentNotFound
from ..models.tournament import Tournament
from ..models.tournament_score import TournamentScore
from ..schemas import LeaderboardEntry


def calculate_ranks(scores: List[Tuple[int, int]]) -> Dict[int, int]:
    """
    Competition ranking ("1224"): tied users share a rank, the next rank skips.

    Args:
        scores: (user_id, score) pairs

    Returns:
        user_id -> rank
    """
    ranks = {}
    previous_score = None
    rank = 0
    for index, (user_id, score) in enumerate(sorted(scores, key=lambda s: (-s[1], s[0]))):
        if score != previous_score:
            rank = index + 1
            previous_score = score
        ranks[user_id] = rank
    return ranks


def get_leaderboard(db: Session, tournament_id: int) -> List[LeaderboardEntry]:
    """Read the materialized rows, ranked by total score (ties by user id)."""
    if not db.get(Tournament, tournament_id):
        raise TournamentNotFound(f"Tournament {tournament_id} not found")

    rows = db.exec(
        select(TournamentScore).where(TournamentScore.tournament_id == tournament_id)
    ).all()

    ranks = calculate_ranks([(row.user_id, row.total_score) for row in rows])
    yesterday_ranks = calculate_ranks([(row.user_id, row.yesterday_total_score) for row in rows])

    # Positive rank_change means the user moved up
    entries = [
        LeaderboardEntry(
            user_id=row.user_id,
            total_score=row.total_score,
            yesterday_total_score=row.yesterday_total_score,
            rank=ranks[row.user_id],
            rank_change=yesterday_ranks[row.user_id] - ranks[row.user_id],
            last_score_update_at=row.last_score_update_at,
        )
        for row in rows
    ]
    return sorted(entries, key=lambda e: (e.rank, e.user_id))
