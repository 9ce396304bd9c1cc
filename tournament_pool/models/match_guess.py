from datetime import datetime, UTC
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint


class MatchGuess(SQLModel, table=True):
    __tablename__ = "match_guesses"
    __table_args__ = (UniqueConstraint("user_id", "match_id", name="unique_user_match_guess"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    match_id: int = Field(foreign_key="matches.id", index=True)

    # Prediction
    home_score: Optional[int] = Field(default=None)
    away_score: Optional[int] = Field(default=None)
    home_penalty_winner: bool = Field(default=False)
    away_penalty_winner: bool = Field(default=False)
    boost_type: Optional[str] = Field(default=None)  # silver, golden

    # Points (NULL until the match has an authoritative result)
    score: Optional[int] = Field(default=None)  # base points
    boost_multiplier: Optional[float] = Field(default=None)
    final_score: Optional[int] = Field(default=None)  # base points * multiplier
    score_kind: Optional[str] = Field(default=None)  # exact, outcome, miss

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
