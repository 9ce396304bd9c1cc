from datetime import datetime, UTC
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint


class QualificationPrediction(SQLModel, table=True):
    __tablename__ = "qualification_predictions"
    __table_args__ = (UniqueConstraint("user_id", "group_id", "team_id", name="unique_user_group_team"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    tournament_id: int = Field(foreign_key="tournaments.id", index=True)
    group_id: int = Field(foreign_key="tournament_groups.id", index=True)
    team_id: int = Field(foreign_key="teams.id")
    predicted_position: int  # 1..N
    predicted_to_qualify: bool = Field(default=False)  # only meaningful for 3rd place

    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class OutcomePrediction(SQLModel, table=True):
    __tablename__ = "outcome_predictions"
    __table_args__ = (UniqueConstraint("user_id", "tournament_id", name="unique_user_tournament_outcome"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    tournament_id: int = Field(foreign_key="tournaments.id", index=True)

    # Honor roll
    champion_team_id: Optional[int] = Field(default=None, foreign_key="teams.id")
    runner_up_team_id: Optional[int] = Field(default=None, foreign_key="teams.id")
    third_place_team_id: Optional[int] = Field(default=None, foreign_key="teams.id")

    # Individual awards
    best_player_id: Optional[int] = Field(default=None, foreign_key="players.id")
    top_goalscorer_player_id: Optional[int] = Field(default=None, foreign_key="players.id")
    best_goalkeeper_player_id: Optional[int] = Field(default=None, foreign_key="players.id")
    best_young_player_id: Optional[int] = Field(default=None, foreign_key="players.id")

    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
