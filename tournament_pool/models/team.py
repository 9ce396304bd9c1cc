from datetime import datetime, UTC
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint


class Team(SQLModel, table=True):
    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    short_name: Optional[str] = Field(default=None)  # e.g. ARG
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Player(SQLModel, table=True):
    __tablename__ = "players"

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournaments.id", index=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    name: str
    position: Optional[str] = Field(default=None)


class TournamentGroup(SQLModel, table=True):
    __tablename__ = "tournament_groups"
    __table_args__ = (UniqueConstraint("tournament_id", "group_letter", name="unique_tournament_group_letter"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournaments.id", index=True)
    group_letter: str  # A-L


class TournamentGroupTeam(SQLModel, table=True):
    __tablename__ = "tournament_group_teams"
    __table_args__ = (UniqueConstraint("group_id", "team_id", name="unique_group_team"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    group_id: int = Field(foreign_key="tournament_groups.id", index=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
