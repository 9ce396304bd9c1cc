import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine, select
from sqlmodel.pool import StaticPool

from main import app
from tournament_pool.database import get_session
from tournament_pool.models import (
    Match,
    MatchGuess,
    MatchResult,
    Team,
    Tournament,
    TournamentGroup,
    TournamentGroupTeam,
    User,
)

# Create in-memory database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Round robin order for a 4-team group: 1v2, 1v3, 1v4, 2v3, 2v4, 3v4
ROUND_ROBIN = [(0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)]


@pytest.fixture(name="session")
def session_fixture():
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="tournament")
def tournament_fixture(session: Session):
    tournament = Tournament(
        name="Test Cup",
        game_exact_score_points=2,
        game_correct_outcome_points=1,
        qualified_team_points=1,
        exact_position_qualified_points=2,
        max_silver_games=2,
        max_golden_games=1,
    )
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return tournament


@pytest.fixture(name="users")
def users_fixture(session: Session):
    users = [User(email=f"user{i}@example.com", nickname=f"user{i}") for i in range(1, 4)]
    session.add_all(users)
    session.commit()
    for user in users:
        session.refresh(user)
    return users


@pytest.fixture(name="make_group")
def make_group_fixture(session: Session):
    """Create a 4-team group with its six round-robin matches."""
    def make_group(tournament: Tournament, letter: str = "A"):
        group = TournamentGroup(tournament_id=tournament.id, group_letter=letter)
        teams = [Team(name=f"Team {letter}{i}") for i in range(1, 5)]
        session.add(group)
        session.add_all(teams)
        session.commit()

        session.add_all([TournamentGroupTeam(group_id=group.id, team_id=team.id) for team in teams])

        next_number = len(session.exec(
            select(Match).where(Match.tournament_id == tournament.id)
        ).all()) + 1
        matches = [
            Match(
                tournament_id=tournament.id,
                match_number=next_number + i,
                stage="group",
                group_id=group.id,
                home_team_id=teams[home].id,
                away_team_id=teams[away].id,
            )
            for i, (home, away) in enumerate(ROUND_ROBIN)
        ]
        session.add_all(matches)
        session.commit()
        for match in matches:
            session.refresh(match)
        return group, teams, matches

    return make_group


@pytest.fixture(name="add_result")
def add_result_fixture(session: Session):
    def add_result(match: Match, home_score, away_score, **kwargs) -> MatchResult:
        result = MatchResult(match_id=match.id, home_score=home_score, away_score=away_score, **kwargs)
        session.add(result)
        session.commit()
        session.refresh(result)
        return result

    return add_result


@pytest.fixture(name="add_guess")
def add_guess_fixture(session: Session):
    def add_guess(user: User, match: Match, home_score, away_score, **kwargs) -> MatchGuess:
        guess = MatchGuess(
            user_id=user.id,
            match_id=match.id,
            home_score=home_score,
            away_score=away_score,
            **kwargs
        )
        session.add(guess)
        session.commit()
        session.refresh(guess)
        return guess

    return add_guess
