from .user import User
from .team import Team, Player, TournamentGroup, TournamentGroupTeam
from .tournament import Tournament
from .match import Match, MatchResult
from .match_guess import MatchGuess
from .prediction import QualificationPrediction, OutcomePrediction
from .third_place_rule import ThirdPlaceRule
from .tournament_score import TournamentScore

__all__ = [
    "User",
    "Team",
    "Player",
    "TournamentGroup",
    "TournamentGroupTeam",
    "Tournament",
    "Match",
    "MatchResult",
    "MatchGuess",
    "QualificationPrediction",
    "OutcomePrediction",
    "ThirdPlaceRule",
    "TournamentScore",
]
