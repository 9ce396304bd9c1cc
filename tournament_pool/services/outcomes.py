from typing import Optional
from sqlmodel import Session, select

from ..exceptions import TournamentNotFound
from ..models.prediction import OutcomePrediction
from ..models.tournament import Tournament
from ..schemas import ActualOutcomes, OutcomeScore, TournamentConfig

AWARD_FIELDS = {
    "best_player": "best_player_id",
    "top_goalscorer": "top_goalscorer_player_id",
    "best_goalkeeper": "best_goalkeeper_player_id",
    "best_young_player": "best_young_player_id",
}


def _hit(predicted: Optional[int], actual: Optional[int]) -> bool:
    return predicted is not None and predicted == actual


def score_outcomes(
    prediction: Optional[OutcomePrediction],
    actual: ActualOutcomes,
    config: TournamentConfig
) -> OutcomeScore:
    """
    Score honor roll and individual award picks. No partial credit;
    everything is pending until the tournament has concluded.
    """
    if not actual.is_concluded:
        return OutcomeScore(status="pending")
    if prediction is None:
        return OutcomeScore(status="complete")

    points = {
        "champion": config.champion_points if _hit(prediction.champion_team_id, actual.champion_team_id) else 0,
        "runner_up": config.runner_up_points if _hit(prediction.runner_up_team_id, actual.runner_up_team_id) else 0,
        "third_place": (
            config.third_place_points if _hit(prediction.third_place_team_id, actual.third_place_team_id) else 0
        ),
    }
    for category, field in AWARD_FIELDS.items():
        hit = _hit(getattr(prediction, field), getattr(actual, field))
        points[category] = config.individual_award_points if hit else 0

    return OutcomeScore(status="complete", **points)


def get_outcome_prediction(db: Session, user_id: int, tournament_id: int) -> Optional[OutcomePrediction]:
    return db.exec(
        select(OutcomePrediction).where(
            OutcomePrediction.user_id == user_id,
            OutcomePrediction.tournament_id == tournament_id
        )
    ).first()


def calculate_outcome_score(db: Session, user_id: int, tournament_id: int) -> OutcomeScore:
    tournament = db.get(Tournament, tournament_id)
    if not tournament:
        raise TournamentNotFound(f"Tournament {tournament_id} not found")

    prediction = get_outcome_prediction(db, user_id, tournament_id)
    return score_outcomes(prediction, tournament.actual_outcomes(), tournament.scoring_config())
