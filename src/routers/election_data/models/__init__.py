from .election_models import (
    State,
    District,
    AssemblyConstituency,
    Booth,
    Election,
    BoothTurnout,
    BoothResult,
    Party,
    Candidate,
)

__all__ = [
    "State",
    "District",
    "AssemblyConstituency",
    "Booth",
    "Election",
    "BoothTurnout",
    "BoothResult",
    "Party",
    "Candidate",
]
