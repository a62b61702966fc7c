# src/routers/election_data/schemas/rows.py
"""
Typed row shapes returned by the data accessor.

Each query result is validated into one of these models exactly once, at the
data-access boundary, so the analytics code works with named fields instead
of raw driver rows. Missing turnout/result values (left joins) read as 0.
"""
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator


def _zero_if_none(value):
    # SUM() over bigint comes back as Decimal on PostgreSQL
    return int(value) if value is not None else 0


Count = Annotated[int, BeforeValidator(_zero_if_none)]


class RowModel(BaseModel):
    model_config = {"from_attributes": True}


class StateRow(RowModel):
    state_id: int
    state_name: str


class ConstituencyRow(RowModel):
    ac_id: int
    ac_name: str
    ac_number: Optional[int] = None
    district_id: Optional[int] = None
    district_name: Optional[str] = None
    state_id: Optional[int] = None
    state_name: Optional[str] = None


class ConstituencySummaryRow(ConstituencyRow):
    total_electors: Count = 0
    total_booths: Count = 0


class BoothTurnoutRow(RowModel):
    booth_id: int
    booth_number: str
    booth_name: Optional[str] = None
    ac_id: int
    total_electors: Count = 0
    total_votes_cast: Count = 0
    male_voters: Count = 0
    female_voters: Count = 0
    other_voters: Count = 0


class BoothResultRow(RowModel):
    booth_id: int
    election_id: int
    candidate_id: int
    candidate_name: Optional[str] = None
    party_id: Optional[int] = None
    party_name: Optional[str] = None
    party_symbol: Optional[str] = None
    votes_secured: Count = 0
    election_year: Optional[int] = None


class ElectionRow(RowModel):
    election_id: int
    election_year: int


class TurnoutTotalsRow(RowModel):
    election_id: Optional[int] = None
    election_year: Optional[int] = None
    total_booths: Count = 0
    total_electors: Count = 0
    total_votes_cast: Count = 0
    male_voters: Count = 0
    female_voters: Count = 0
    other_voters: Count = 0


class StateStatsRow(RowModel):
    total_assemblies: Count = 0
    total_districts: Count = 0
    total_voters: Count = 0
    total_booths: Count = 0
    total_votes_cast: Count = 0
    total_candidates: Count = 0
    total_parties: Count = 0


class CandidateRow(RowModel):
    candidate_id: int
    candidate_name: Optional[str] = None
    party_id: Optional[int] = None
    party_name: Optional[str] = None
    party_symbol: Optional[str] = None
    age: Optional[float] = None
    gender: Optional[str] = None
    education: Optional[str] = None
    criminal_cases: Optional[int] = None
    assets: Optional[int] = None
    liabilities: Optional[int] = None


class ConstituencyVotesRow(RowModel):
    ac_id: int
    ac_name: str
    votes: Count = 0
