"""Compare materialized tournament scores against a fresh recalculation."""
import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session
from tournament_pool.database import engine, create_db_and_tables
from tournament_pool.exceptions import TournamentNotFound
from tournament_pool.logging_config import setup_logging
from tournament_pool.services.aggregation import recalculate, validate_materialized_scores


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("tournament_id", type=int)
    parser.add_argument("--user", type=int, action="append", dest="user_ids",
                        help="Only check this user (repeatable)")
    parser.add_argument("--fix", action="store_true",
                        help="Recalculate users whose stored scores are off")
    args = parser.parse_args()

    setup_logging()
    create_db_and_tables()

    with Session(engine) as session:
        try:
            mismatches = validate_materialized_scores(session, args.tournament_id, args.user_ids)
        except TournamentNotFound as e:
            print(e)
            return 1

        if not mismatches:
            print(f"All materialized scores match for tournament {args.tournament_id}")
            return 0

        for mismatch in mismatches:
            print(
                f"User {mismatch['user_id']}: {mismatch['field']} "
                f"stored={mismatch['materialized']} expected={mismatch['expected']}"
            )

        user_ids = sorted({m["user_id"] for m in mismatches})
        print(f"{len(mismatches)} mismatching fields across {len(user_ids)} users")

        if args.fix:
            rows = recalculate(session, user_ids, args.tournament_id)
            print(f"Recalculated {len(rows)} users")
            return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
