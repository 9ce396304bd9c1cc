"""
Partial-credit scoring for group position / qualification predictions.

Scoring rules:
- Positions 1-2 are graded once the team's own group is complete:
  exact position -> exact_position_qualified_points, top 2 but the other
  position -> qualified_team_points, outside the top 2 -> 0.
- Position 3 is graded only when the user flagged the team to qualify, and only
  once every group is complete (best thirds are chosen across groups).
- Position 4+, or 3 without the flag, is not graded.
"""

from typing import Dict, List, NamedTuple, Optional
from sqlmodel import Session, select

from ..exceptions import TournamentNotFound
from ..models.prediction import QualificationPrediction
from ..models.tournament import Tournament
from ..schemas import (
    GroupQualificationScore,
    GroupStandingsRow,
    Pending,
    QualificationScore,
    Scored,
    TeamScoringResult,
    ThirdPlaceSelection,
    TournamentConfig,
)
from .standings import GroupTable, calculate_actual_group_tables
from .third_place import get_third_place_rules_map, select_third_place_qualifiers


def is_graded(predicted_position: int, predicted_to_qualify: bool) -> bool:
    return predicted_position in (1, 2) or (predicted_position == 3 and predicted_to_qualify)


def _score_team(
    predicted_position: int,
    actual_position: int,
    qualified: bool,
    config: TournamentConfig
) -> Scored:
    if not qualified:
        return Scored(position=actual_position, qualified=False, points=0, reason="not_qualified")

    if predicted_position == actual_position:
        return Scored(
            position=actual_position,
            qualified=True,
            points=config.exact_position_qualified_points,
            reason="exact_match"
        )

    return Scored(
        position=actual_position,
        qualified=True,
        points=config.qualified_team_points,
        reason="qualified_wrong_position"
    )


def score_group_qualification(
    group_id: int,
    standings: List[GroupStandingsRow],
    predictions: List[QualificationPrediction],
    is_group_complete: bool,
    all_groups_complete: bool,
    third_place: Optional[ThirdPlaceSelection],
    config: TournamentConfig
) -> List[TeamScoringResult]:
    """
    Grade one group's qualification predictions against the actual table.

    Teams without a prediction (or not in the table) are left out, as are
    predictions that are not graded at all.
    """
    positions = {row.team_id: row.position for row in standings}
    third_place_ids = set(third_place.qualified_team_ids) if third_place else set()

    results = []
    for prediction in sorted(predictions, key=lambda p: p.predicted_position):
        if prediction.team_id not in positions:
            continue
        if not is_graded(prediction.predicted_position, prediction.predicted_to_qualify):
            continue

        actual_position = positions[prediction.team_id]

        if prediction.predicted_position in (1, 2):
            complete = is_group_complete
            qualified = actual_position in (1, 2)
        else:
            complete = is_group_complete and all_groups_complete
            qualified = actual_position in (1, 2) or (
                actual_position == 3 and prediction.team_id in third_place_ids
            )

        if complete:
            outcome = _score_team(prediction.predicted_position, actual_position, qualified, config)
        else:
            outcome = Pending()

        results.append(TeamScoringResult(
            team_id=prediction.team_id,
            group_id=group_id,
            predicted_position=prediction.predicted_position,
            predicted_to_qualify=prediction.predicted_to_qualify,
            outcome=outcome,
        ))

    return results


class QualificationContext(NamedTuple):
    """Actual group tables shared by every user of a tournament."""
    config: TournamentConfig
    tables: List[GroupTable]
    all_groups_complete: bool
    third_place: Optional[ThirdPlaceSelection]


def load_qualification_context(db: Session, tournament: Tournament) -> QualificationContext:
    """
    Build the actual group tables once per tournament. Third place qualifiers
    are only selected once every group is complete.
    """
    tables = calculate_actual_group_tables(db, tournament.id)
    all_groups_complete = bool(tables) and all(table.is_complete for table in tables)

    third_place = None
    if all_groups_complete:
        third_placed = [
            (table.group.group_letter, table.standings[2])
            for table in tables
            if len(table.standings) >= 3
        ]
        third_place = select_third_place_qualifiers(
            third_placed,
            tournament.third_place_qualifiers,
            get_third_place_rules_map(db, tournament.id)
        )

    return QualificationContext(tournament.scoring_config(), tables, all_groups_complete, third_place)


def get_qualification_predictions(
    db: Session,
    user_id: int,
    tournament_id: int
) -> Dict[int, List[QualificationPrediction]]:
    """User's qualification predictions grouped by group id."""
    statement = select(QualificationPrediction).where(
        QualificationPrediction.user_id == user_id,
        QualificationPrediction.tournament_id == tournament_id
    )
    by_group: Dict[int, List[QualificationPrediction]] = {}
    for prediction in db.exec(statement).all():
        by_group.setdefault(prediction.group_id, []).append(prediction)
    return by_group


def calculate_qualified_teams_score(
    db: Session,
    user_id: int,
    tournament_id: int,
    context: Optional[QualificationContext] = None
) -> QualificationScore:
    """Calculate a user's qualification score for a tournament with a per-group breakdown."""
    if context is None:
        tournament = db.get(Tournament, tournament_id)
        if not tournament:
            raise TournamentNotFound(f"Tournament {tournament_id} not found")
        context = load_qualification_context(db, tournament)

    predictions_by_group = get_qualification_predictions(db, user_id, tournament_id)

    breakdown = []
    total_score = 0
    for table in context.tables:
        predictions = predictions_by_group.get(table.group.id)
        if not predictions:
            continue

        teams = score_group_qualification(
            table.group.id,
            table.standings,
            predictions,
            table.is_complete,
            context.all_groups_complete,
            context.third_place,
            context.config
        )
        total_score += sum(team.points_awarded for team in teams)
        breakdown.append(GroupQualificationScore(
            group_id=table.group.id,
            group_letter=table.group.group_letter,
            is_complete=table.is_complete,
            teams=teams,
        ))

    return QualificationScore(
        user_id=user_id,
        tournament_id=tournament_id,
        total_score=total_score,
        breakdown=breakdown,
    )
