from datetime import datetime, UTC
from typing import Optional
from sqlmodel import SQLModel, Field

from ..config import (
    DEFAULT_GAME_EXACT_SCORE_POINTS,
    DEFAULT_GAME_CORRECT_OUTCOME_POINTS,
    DEFAULT_CHAMPION_POINTS,
    DEFAULT_RUNNER_UP_POINTS,
    DEFAULT_THIRD_PLACE_POINTS,
    DEFAULT_INDIVIDUAL_AWARD_POINTS,
    DEFAULT_QUALIFIED_TEAM_POINTS,
    DEFAULT_EXACT_POSITION_QUALIFIED_POINTS,
    DEFAULT_MAX_SILVER_GAMES,
    DEFAULT_MAX_GOLDEN_GAMES,
)
from ..schemas import TournamentConfig, ActualOutcomes


def _or_default(value: Optional[int], default: int) -> int:
    return default if value is None else value


class Tournament(SQLModel, table=True):
    __tablename__ = "tournaments"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    short_name: Optional[str] = Field(default=None)
    is_active: bool = Field(default=True)

    # Point weights (NULL means "use the default")
    game_exact_score_points: Optional[int] = Field(default=None)
    game_correct_outcome_points: Optional[int] = Field(default=None)
    champion_points: Optional[int] = Field(default=None)
    runner_up_points: Optional[int] = Field(default=None)
    third_place_points: Optional[int] = Field(default=None)
    individual_award_points: Optional[int] = Field(default=None)
    qualified_team_points: Optional[int] = Field(default=None)
    exact_position_qualified_points: Optional[int] = Field(default=None)

    # Boost caps
    max_silver_games: Optional[int] = Field(default=None)
    max_golden_games: Optional[int] = Field(default=None)

    # Group rules
    sort_by_games_between_teams: Optional[bool] = Field(default=None)
    third_place_qualifiers: int = Field(default=0)  # e.g. 8 for a 48-team format

    # Final outcomes (filled by admin once the tournament is over)
    is_concluded: bool = Field(default=False)
    champion_team_id: Optional[int] = Field(default=None, foreign_key="teams.id")
    runner_up_team_id: Optional[int] = Field(default=None, foreign_key="teams.id")
    third_place_team_id: Optional[int] = Field(default=None, foreign_key="teams.id")
    best_player_id: Optional[int] = Field(default=None)
    top_goalscorer_player_id: Optional[int] = Field(default=None)
    best_goalkeeper_player_id: Optional[int] = Field(default=None)
    best_young_player_id: Optional[int] = Field(default=None)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def scoring_config(self) -> TournamentConfig:
        """Point weights and boost caps with defaults filled in."""
        return TournamentConfig(
            game_exact_score_points=_or_default(self.game_exact_score_points, DEFAULT_GAME_EXACT_SCORE_POINTS),
            game_correct_outcome_points=_or_default(self.game_correct_outcome_points, DEFAULT_GAME_CORRECT_OUTCOME_POINTS),
            champion_points=_or_default(self.champion_points, DEFAULT_CHAMPION_POINTS),
            runner_up_points=_or_default(self.runner_up_points, DEFAULT_RUNNER_UP_POINTS),
            third_place_points=_or_default(self.third_place_points, DEFAULT_THIRD_PLACE_POINTS),
            individual_award_points=_or_default(self.individual_award_points, DEFAULT_INDIVIDUAL_AWARD_POINTS),
            qualified_team_points=_or_default(self.qualified_team_points, DEFAULT_QUALIFIED_TEAM_POINTS),
            exact_position_qualified_points=_or_default(
                self.exact_position_qualified_points, DEFAULT_EXACT_POSITION_QUALIFIED_POINTS
            ),
            max_silver_games=_or_default(self.max_silver_games, DEFAULT_MAX_SILVER_GAMES),
            max_golden_games=_or_default(self.max_golden_games, DEFAULT_MAX_GOLDEN_GAMES),
            sort_by_games_between_teams=bool(self.sort_by_games_between_teams),
        )

    def actual_outcomes(self) -> ActualOutcomes:
        return ActualOutcomes(
            is_concluded=self.is_concluded,
            champion_team_id=self.champion_team_id,
            runner_up_team_id=self.runner_up_team_id,
            third_place_team_id=self.third_place_team_id,
            best_player_id=self.best_player_id,
            top_goalscorer_player_id=self.top_goalscorer_player_id,
            best_goalkeeper_player_id=self.best_goalkeeper_player_id,
            best_young_player_id=self.best_young_player_id,
        )
