from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint


class TournamentScore(SQLModel, table=True):
    """Materialized score row: one per user per tournament."""
    __tablename__ = "tournament_scores"
    __table_args__ = (UniqueConstraint("user_id", "tournament_id", name="unique_user_tournament_score"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    tournament_id: int = Field(foreign_key="tournaments.id", index=True)

    # Match predictions (base points, boost excluded)
    total_game_score: int = Field(default=0)
    group_stage_game_score: int = Field(default=0)
    playoff_stage_game_score: int = Field(default=0)

    # Extra points from boosts
    total_boost_bonus: int = Field(default=0)
    group_stage_boost_bonus: int = Field(default=0)
    playoff_stage_boost_bonus: int = Field(default=0)

    total_correct_guesses: int = Field(default=0)
    total_exact_guesses: int = Field(default=0)
    group_correct_guesses: int = Field(default=0)
    group_exact_guesses: int = Field(default=0)
    playoff_correct_guesses: int = Field(default=0)
    playoff_exact_guesses: int = Field(default=0)

    # Tournament-wide predictions
    qualified_teams_score: int = Field(default=0)
    honor_roll_score: int = Field(default=0)
    individual_awards_score: int = Field(default=0)

    total_score: int = Field(default=0, index=True)

    # Snapshot used for day-over-day rank change
    yesterday_total_score: int = Field(default=0)
    yesterday_boost_bonus: int = Field(default=0)

    last_score_update_at: Optional[datetime] = Field(default=None)
