from datetime import datetime, UTC
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint


class Match(SQLModel, table=True):
    __tablename__ = "matches"
    __table_args__ = (UniqueConstraint("tournament_id", "match_number", name="unique_tournament_match_number"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournaments.id", index=True)
    match_number: int = Field(index=True)
    stage: str = Field(default="group", index=True)  # group, playoff
    group_id: Optional[int] = Field(default=None, foreign_key="tournament_groups.id", index=True)

    # Teams (nullable for playoff matches until the bracket is resolved)
    home_team_id: Optional[int] = Field(default=None, foreign_key="teams.id")
    away_team_id: Optional[int] = Field(default=None, foreign_key="teams.id")

    # Symbolic team rules (e.g., "1A", "2B", "3ABCDF", "W49")
    home_team_rule: Optional[str] = Field(default=None)
    away_team_rule: Optional[str] = Field(default=None)

    scheduled_datetime: datetime = Field(default_factory=lambda: datetime.now(UTC))
    location: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_playoff(self) -> bool:
        return self.stage != "group"


class MatchResult(SQLModel, table=True):
    __tablename__ = "match_results"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="matches.id", unique=True, index=True)

    home_score: Optional[int] = Field(default=None)
    away_score: Optional[int] = Field(default=None)
    home_penalty_score: Optional[int] = Field(default=None)
    away_penalty_score: Optional[int] = Field(default=None)

    # Visible but not yet authoritative
    is_draft: bool = Field(default=False)

    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def penalty_winner(self) -> Optional[str]:
        """Side that won the shootout ("home" or "away"), if any."""
        if self.home_penalty_score is None or self.away_penalty_score is None:
            return None
        if self.home_penalty_score > self.away_penalty_score:
            return "home"
        if self.away_penalty_score > self.home_penalty_score:
            return "away"
        return None
