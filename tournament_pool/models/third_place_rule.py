from datetime import datetime, UTC
from typing import Dict, Optional
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field, UniqueConstraint


class ThirdPlaceRule(SQLModel, table=True):
    """Bracket slots for one combination of qualifying third-placed groups."""
    __tablename__ = "third_place_rules"
    __table_args__ = (UniqueConstraint("tournament_id", "combination_key", name="unique_tournament_combination"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournaments.id", index=True)
    combination_key: str  # sorted group letters, e.g. "ABCDEFGH"
    # Bracket slot -> group letter, e.g. {"1A": "C", "1B": "E"}
    rules: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON))

    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
