"""
Request/response DTOs shared by the scoring services and the API routers.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, computed_field


class TournamentConfig(BaseModel):
    """Point weights and boost caps for one tournament."""
    game_exact_score_points: int
    game_correct_outcome_points: int
    champion_points: int
    runner_up_points: int
    third_place_points: int
    individual_award_points: int
    qualified_team_points: int
    exact_position_qualified_points: int
    max_silver_games: int
    max_golden_games: int
    sort_by_games_between_teams: bool = False

    def boost_cap(self, boost_type: str) -> int:
        if boost_type == "silver":
            return self.max_silver_games
        if boost_type == "golden":
            return self.max_golden_games
        return 0


class ActualOutcomes(BaseModel):
    """Final honor roll and award winners of a tournament."""
    is_concluded: bool = False
    champion_team_id: Optional[int] = None
    runner_up_team_id: Optional[int] = None
    third_place_team_id: Optional[int] = None
    best_player_id: Optional[int] = None
    top_goalscorer_player_id: Optional[int] = None
    best_goalkeeper_player_id: Optional[int] = None
    best_young_player_id: Optional[int] = None


# Standings

class GameScore(BaseModel):
    """One group match paired with a score source (result or guess)."""
    home_team_id: Optional[int] = None
    away_team_id: Optional[int] = None
    # Raw values: anything that is not an integer means "not played / not guessed"
    home_score: Any = None
    away_score: Any = None


class GroupStandingsRow(BaseModel):
    team_id: int
    position: int = 0
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0

    @computed_field
    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against


class ThirdPlaceSelection(BaseModel):
    """Outcome of the cross-group third place selection."""
    combination_key: str
    qualified_groups: List[str]
    qualified_team_ids: List[int]
    # Bracket slot -> group letter whose third-placed team fills it
    slot_assignment: Dict[str, str] = Field(default_factory=dict)


# Qualification scoring

class Pending(BaseModel):
    """Ground truth needed to grade the prediction does not exist yet."""
    kind: Literal["pending"] = "pending"


class Scored(BaseModel):
    kind: Literal["scored"] = "scored"
    position: int
    qualified: bool
    points: int
    reason: Literal["exact_match", "qualified_wrong_position", "not_qualified"]


class TeamScoringResult(BaseModel):
    team_id: int
    group_id: int
    predicted_position: int
    predicted_to_qualify: bool
    outcome: Union[Pending, Scored] = Field(discriminator="kind")

    @computed_field
    @property
    def actual_position(self) -> Optional[int]:
        return self.outcome.position if isinstance(self.outcome, Scored) else None

    @computed_field
    @property
    def actually_qualified(self) -> bool:
        return isinstance(self.outcome, Scored) and self.outcome.qualified

    @computed_field
    @property
    def points_awarded(self) -> int:
        return self.outcome.points if isinstance(self.outcome, Scored) else 0

    @computed_field
    @property
    def reason(self) -> str:
        return self.outcome.reason if isinstance(self.outcome, Scored) else "pending"


class GroupQualificationScore(BaseModel):
    group_id: int
    group_letter: str
    is_complete: bool
    teams: List[TeamScoringResult]


class QualificationScore(BaseModel):
    user_id: int
    tournament_id: int
    total_score: int
    breakdown: List[GroupQualificationScore]


# Match and outcome scoring

class MatchScore(BaseModel):
    status: Literal["pending", "complete"]
    kind: Optional[Literal["exact", "outcome", "miss"]] = None
    base_points: int = 0
    boost_multiplier: float = 1.0
    points: int = 0
    breakdown: List[str] = Field(default_factory=list)


class OutcomeScore(BaseModel):
    status: Literal["pending", "complete"]
    champion: int = 0
    runner_up: int = 0
    third_place: int = 0
    best_player: int = 0
    top_goalscorer: int = 0
    best_goalkeeper: int = 0
    best_young_player: int = 0

    @computed_field
    @property
    def honor_roll_score(self) -> int:
        return self.champion + self.runner_up + self.third_place

    @computed_field
    @property
    def individual_awards_score(self) -> int:
        return self.best_player + self.top_goalscorer + self.best_goalkeeper + self.best_young_player

    @computed_field
    @property
    def total(self) -> int:
        return self.honor_roll_score + self.individual_awards_score


# Aggregation

class GameStatistics(BaseModel):
    """Raw per-user sums over scored match guesses; any field may be missing."""
    user_id: int
    total_game_score: Optional[int] = None
    group_stage_game_score: Optional[int] = None
    playoff_stage_game_score: Optional[int] = None
    total_boost_bonus: Optional[int] = None
    group_stage_boost_bonus: Optional[int] = None
    playoff_stage_boost_bonus: Optional[int] = None
    total_correct_guesses: Optional[int] = None
    total_exact_guesses: Optional[int] = None
    group_correct_guesses: Optional[int] = None
    group_exact_guesses: Optional[int] = None
    playoff_correct_guesses: Optional[int] = None
    playoff_exact_guesses: Optional[int] = None


class BoostCounts(BaseModel):
    silver: int = 0
    golden: int = 0
    max_silver: int = 0
    max_golden: int = 0


class LeaderboardEntry(BaseModel):
    user_id: int
    total_score: int
    yesterday_total_score: int
    rank: int
    rank_change: int
    last_score_update_at: Optional[datetime] = None
