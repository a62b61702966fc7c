import pytest
from fastapi.testclient import TestClient

from main import create_app
from src.database import Base, Database
from src.routers.election_data.models import (
    AssemblyConstituency,
    Booth,
    BoothResult,
    BoothTurnout,
    Candidate,
    District,
    Election,
    Party,
    State,
)

# (booth_id, ac_id, booth_number, electors, male, female, other, votes_cast, {candidate_id: votes})
ELECTION_2022_BOOTHS = [
    (1, 1, "1", 1000, 520, 470, 10, 650, {1: 400, 2: 250}),
    (2, 1, "10", 600, 300, 300, 0, 270, {1: 100, 2: 150}),
    (3, 1, "2", 1200, 600, 590, 10, 900, {1: 480, 2: 420}),
    (4, 1, "3", 500, 260, 240, 0, 400, {1: 300, 2: 100}),
    (6, 2, "1", 800, 400, 400, 0, 500, {3: 300, 4: 200}),
]


def seed(session):
    session.add_all([
        State(state_id=1, state_name="Uttar Pradesh"),
        State(state_id=2, state_name="Bihar"),
        District(district_id=1, district_name="Lucknow", state_id=1),
        AssemblyConstituency(ac_id=1, ac_name="Lucknow Central", ac_number=173, district_id=1),
        AssemblyConstituency(ac_id=2, ac_name="Mohanlalganj (SC)", ac_number=176, district_id=1),
        Election(election_id=1, election_year=2022),
        Election(election_id=2, election_year=2017),
        Party(party_id=1, party_name="BJP", party_symbol="Lotus", party_color="#FF9933"),
        Party(party_id=2, party_name="SP", party_symbol="Cycle", party_color="#FF2222"),
        Party(party_id=3, party_name="INC", party_symbol="Hand", party_color="#19AAED"),
        Candidate(candidate_id=1, candidate_name="Candidate A", party_id=1, age=54, gender="M",
                  education="Graduate", criminal_cases=0, assets=12000000, liabilities=0),
        Candidate(candidate_id=2, candidate_name="Candidate B", party_id=2, age=47, gender="F"),
        Candidate(candidate_id=3, candidate_name="Candidate C", party_id=3),
        Candidate(candidate_id=4, candidate_name="Candidate D", party_id=1),
    ])
    session.flush()

    booths = [(b[0], b[1], b[2]) for b in ELECTION_2022_BOOTHS] + [(5, 1, "4")]
    for booth_id, ac_id, number in booths:
        session.add(Booth(booth_id=booth_id, ac_id=ac_id, booth_number=number, booth_name=f"Booth {number}"))
    session.flush()

    for booth_id, _, _, electors, male, female, other, cast, votes in ELECTION_2022_BOOTHS:
        session.add(BoothTurnout(booth_id=booth_id, election_id=1, total_electors=electors, male_voters=male,
                                 female_voters=female, other_voters=other, total_votes_cast=cast))
        for candidate_id, secured in votes.items():
            session.add(BoothResult(booth_id=booth_id, election_id=1, candidate_id=candidate_id,
                                    votes_secured=secured))

    # booth 1 also voted in 2017
    session.add(BoothTurnout(booth_id=1, election_id=2, total_electors=950, male_voters=500,
                             female_voters=450, other_voters=0, total_votes_cast=570))
    session.add(BoothResult(booth_id=1, election_id=2, candidate_id=1, votes_secured=200))
    session.add(BoothResult(booth_id=1, election_id=2, candidate_id=2, votes_secured=370))
    session.commit()


@pytest.fixture(scope="session")
def database():
    database = Database("sqlite://")
    Base.metadata.create_all(database.engine)
    session = database.get_session()
    try:
        seed(session)
    finally:
        session.close()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database):
    app = create_app(database=database)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
