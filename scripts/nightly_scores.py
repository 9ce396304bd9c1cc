"""Daily job: snapshot yesterday's totals, then rebuild every user's materialized score."""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session, select
from tournament_pool.database import engine, create_db_and_tables
from tournament_pool.logging_config import setup_logging
from tournament_pool.models.tournament import Tournament
from tournament_pool.services.aggregation import recalculate_tournament, snapshot_yesterday_scores


def run():
    setup_logging()
    create_db_and_tables()

    with Session(engine) as session:
        tournaments = session.exec(select(Tournament).where(Tournament.is_active == True)).all()  # noqa: E712
        for tournament in tournaments:
            snapshotted = snapshot_yesterday_scores(session, tournament.id)
            rows = recalculate_tournament(session, tournament.id)
            print(f"{tournament.name}: snapshot {snapshotted} rows, recalculated {len(rows)} users")


if __name__ == "__main__":
    run()
