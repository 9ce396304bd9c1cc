import os
from pathlib import Path

# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR}/tournament_pool.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Default point weights (used when a tournament leaves a weight unset)
DEFAULT_GAME_EXACT_SCORE_POINTS = 2
DEFAULT_GAME_CORRECT_OUTCOME_POINTS = 1
DEFAULT_CHAMPION_POINTS = 5
DEFAULT_RUNNER_UP_POINTS = 3
DEFAULT_THIRD_PLACE_POINTS = 1
DEFAULT_INDIVIDUAL_AWARD_POINTS = 3
DEFAULT_QUALIFIED_TEAM_POINTS = 1
DEFAULT_EXACT_POSITION_QUALIFIED_POINTS = 1
DEFAULT_MAX_SILVER_GAMES = 0
DEFAULT_MAX_GOLDEN_GAMES = 0

# Boosts
BOOST_MULTIPLIERS = {
    "silver": 2.0,
    "golden": 3.0,
}
