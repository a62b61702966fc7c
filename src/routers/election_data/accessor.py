# src/routers/election_data/accessor.py
"""
Read-only data access for the election schema.

``ElectionDataAccessor`` wraps a SQLAlchemy ``Session`` and exposes one typed
read per query the API needs. Every statement goes through ``fetch_rows``,
which only ever sends bound parameters and translates driver failures into
the API error taxonomy:

* pool checkout timeout / ``statement_timeout``  -> ``Timeout`` (503)
* connection and other operational errors         -> ``DataUnavailable`` (503)
* values the store rejects (bad casts, overflow)  -> ``QueryError`` (400)

A session opened by ``get_db`` also carries a client-disconnect check; once the
client is gone no further statements are sent (``Cancelled``).

Absence is never an error here: single-row reads return ``None`` and list
reads return ``[]``. Callers decide when absence means ``NotFound``.
"""
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from loguru import logger
from psycopg2 import errors as pg_errors
from sqlalchemy import and_, distinct, func, select, text
from sqlalchemy.exc import DataError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from src.database.db_session import DISCONNECT_CHECK
from src.utils.exceptions import Cancelled, DataUnavailable, QueryError, Timeout
from .models import (
    AssemblyConstituency as AC,
    Booth,
    BoothResult,
    BoothTurnout,
    Candidate,
    District,
    Election,
    Party,
    State,
)
from .schemas import (
    BoothResultRow,
    BoothTurnoutRow,
    CandidateRow,
    ConstituencyRow,
    ConstituencySummaryRow,
    ConstituencyVotesRow,
    ElectionRow,
    StateRow,
    StateStatsRow,
    TurnoutTotalsRow,
)

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


def booth_number_key(booth_number: Optional[str]):
    """Sort key ordering text booth numbers numerically ("2" < "10" < "10A" < "X")."""
    value = (booth_number or "").strip()
    match = _LEADING_DIGITS.match(value)
    if match:
        return (0, int(match.group(1)), value)
    return (1, 0, value)


def sort_booths(rows: Iterable[BoothTurnoutRow]) -> List[BoothTurnoutRow]:
    return sorted(rows, key=lambda row: (booth_number_key(row.booth_number), row.booth_id))


class ElectionDataAccessor:
    """ This Class contains all the read queries against the election tables."""

    def __init__(self, db: Session):
        self.db = db

    # ----------------------
    # Execution
    # ----------------------
    def fetch_rows(
        self,
        statement: Union[Executable, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Sequence[Mapping[str, Any]]:
        """Execute a statement with bound parameters and return its rows as mappings."""
        if isinstance(statement, str):
            statement = text(statement)
        self._raise_if_cancelled()
        try:
            return self.db.execute(statement, dict(params or {})).mappings().all()
        except PoolTimeoutError as e:
            self._rollback()
            logger.error(f"Timed out waiting for a database connection: {e}")
            raise Timeout("Database connection timed out", detail=str(e)) from e
        except OperationalError as e:
            self._rollback()
            if isinstance(e.orig, pg_errors.QueryCanceled):
                logger.error(f"Database statement timed out: {e.orig}")
                raise Timeout(detail=str(e.orig)) from e
            logger.error(f"Database unavailable: {e}")
            raise DataUnavailable(detail=str(e)) from e
        except InterfaceError as e:
            self._rollback()
            logger.error(f"Database connection lost: {e}")
            raise DataUnavailable(detail=str(e)) from e
        except DataError as e:
            self._rollback()
            logger.warning(f"Database rejected query parameters: {e}")
            raise QueryError("Invalid query parameters", detail=str(e)) from e

    def _raise_if_cancelled(self) -> None:
        is_disconnected = self.db.info.get(DISCONNECT_CHECK)
        if is_disconnected is not None and is_disconnected():
            logger.info("Client disconnected, skipping remaining queries")
            raise Cancelled()

    def _fetch_one(self, statement, params=None) -> Optional[Mapping[str, Any]]:
        rows = self.fetch_rows(statement, params)
        return rows[0] if rows else None

    def _rollback(self) -> None:
        try:
            self.db.rollback()
        except Exception as e:
            logger.warning(f"Rollback after failed query also failed: {e}")

    def ping(self) -> Dict[str, Any]:
        row = self._fetch_one(text("SELECT 1 AS ok"))
        return {
            "connected": bool(row and row["ok"] == 1),
            "dialect": self.db.get_bind().dialect.name,
        }

    # ----------------------
    # Elections
    # ----------------------
    def list_elections(self) -> List[ElectionRow]:
        stmt = select(Election.election_id, Election.election_year).order_by(
            Election.election_year, Election.election_id
        )
        return [ElectionRow.model_validate(dict(r)) for r in self.fetch_rows(stmt)]

    def get_election(self, election_id: int) -> Optional[ElectionRow]:
        stmt = select(Election.election_id, Election.election_year).where(
            Election.election_id == election_id
        )
        row = self._fetch_one(stmt)
        return ElectionRow.model_validate(dict(row)) if row else None

    def get_election_by_year(self, election_year: int) -> Optional[ElectionRow]:
        stmt = (
            select(Election.election_id, Election.election_year)
            .where(Election.election_year == election_year)
            .order_by(Election.election_id)
            .limit(1)
        )
        row = self._fetch_one(stmt)
        return ElectionRow.model_validate(dict(row)) if row else None

    # ----------------------
    # States
    # ----------------------
    def list_states(self) -> List[StateRow]:
        stmt = select(State.state_id, State.state_name).order_by(State.state_id)
        return [StateRow.model_validate(dict(r)) for r in self.fetch_rows(stmt)]

    def get_state(self, state_id: int) -> Optional[StateRow]:
        stmt = select(State.state_id, State.state_name).where(State.state_id == state_id)
        row = self._fetch_one(stmt)
        return StateRow.model_validate(dict(row)) if row else None

    def get_state_stats(self, state_id: int, election_id: int) -> StateStatsRow:
        # turnout sums and result counts are queried apart so the result join
        # does not multiply the turnout rows
        structure = select(
            func.count(distinct(AC.ac_id)).label("total_assemblies"),
            func.count(distinct(District.district_id)).label("total_districts"),
            func.count(distinct(Booth.booth_id)).label("total_booths"),
            func.sum(BoothTurnout.total_electors).label("total_voters"),
            func.sum(BoothTurnout.total_votes_cast).label("total_votes_cast"),
        ).select_from(District).join(
            AC, AC.district_id == District.district_id
        ).outerjoin(
            Booth, Booth.ac_id == AC.ac_id
        ).outerjoin(
            BoothTurnout,
            and_(BoothTurnout.booth_id == Booth.booth_id, BoothTurnout.election_id == election_id),
        ).where(District.state_id == state_id)

        contest = select(
            func.count(distinct(Candidate.candidate_id)).label("total_candidates"),
            func.count(distinct(Candidate.party_id)).label("total_parties"),
        ).select_from(BoothResult).join(
            Booth, Booth.booth_id == BoothResult.booth_id
        ).join(
            AC, AC.ac_id == Booth.ac_id
        ).join(
            District, District.district_id == AC.district_id
        ).join(
            Candidate, Candidate.candidate_id == BoothResult.candidate_id
        ).where(District.state_id == state_id, BoothResult.election_id == election_id)

        data = dict(self._fetch_one(structure) or {})
        data.update(self._fetch_one(contest) or {})
        return StateStatsRow.model_validate(data)

    # ----------------------
    # Constituencies
    # ----------------------
    def _constituency_columns(self):
        return (
            AC.ac_id,
            AC.ac_name,
            AC.ac_number,
            District.district_id,
            District.district_name,
            State.state_id,
            State.state_name,
        )

    def get_constituency(self, ac_id: int) -> Optional[ConstituencyRow]:
        stmt = (
            select(*self._constituency_columns())
            .select_from(AC)
            .outerjoin(District, District.district_id == AC.district_id)
            .outerjoin(State, State.state_id == District.state_id)
            .where(AC.ac_id == ac_id)
        )
        row = self._fetch_one(stmt)
        return ConstituencyRow.model_validate(dict(row)) if row else None

    def list_constituencies(
        self,
        election_id: int,
        state_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ConstituencySummaryRow]:
        columns = self._constituency_columns()
        stmt = (
            select(
                *columns,
                func.sum(BoothTurnout.total_electors).label("total_electors"),
                func.count(distinct(Booth.booth_id)).label("total_booths"),
            )
            .select_from(AC)
            .outerjoin(District, District.district_id == AC.district_id)
            .outerjoin(State, State.state_id == District.state_id)
            .outerjoin(Booth, Booth.ac_id == AC.ac_id)
            .outerjoin(
                BoothTurnout,
                and_(BoothTurnout.booth_id == Booth.booth_id, BoothTurnout.election_id == election_id),
            )
            .group_by(*columns)
        )
        if state_id is not None:
            stmt = stmt.where(State.state_id == state_id).order_by(AC.ac_number, AC.ac_id)
        else:
            stmt = stmt.order_by(State.state_name, AC.ac_number, AC.ac_id)
        if limit is not None:
            stmt = stmt.limit(limit).offset(offset)
        return [ConstituencySummaryRow.model_validate(dict(r)) for r in self.fetch_rows(stmt)]

    def count_constituencies(self, state_id: Optional[int] = None) -> int:
        stmt = select(func.count(AC.ac_id).label("total")).select_from(AC)
        if state_id is not None:
            stmt = stmt.join(District, District.district_id == AC.district_id).where(
                District.state_id == state_id
            )
        row = self._fetch_one(stmt)
        return int(row["total"]) if row else 0

    def get_constituency_totals(self, ac_id: int, election_id: int) -> TurnoutTotalsRow:
        stmt = (
            select(
                func.count(distinct(Booth.booth_id)).label("total_booths"),
                func.sum(BoothTurnout.total_electors).label("total_electors"),
                func.sum(BoothTurnout.total_votes_cast).label("total_votes_cast"),
                func.sum(BoothTurnout.male_voters).label("male_voters"),
                func.sum(BoothTurnout.female_voters).label("female_voters"),
                func.sum(BoothTurnout.other_voters).label("other_voters"),
            )
            .select_from(Booth)
            .outerjoin(
                BoothTurnout,
                and_(BoothTurnout.booth_id == Booth.booth_id, BoothTurnout.election_id == election_id),
            )
            .where(Booth.ac_id == ac_id)
        )
        row = dict(self._fetch_one(stmt) or {})
        row["election_id"] = election_id
        return TurnoutTotalsRow.model_validate(row)

    def list_constituency_turnout_history(self, ac_id: int) -> List[TurnoutTotalsRow]:
        stmt = (
            select(
                Election.election_id,
                Election.election_year,
                func.count(distinct(Booth.booth_id)).label("total_booths"),
                func.sum(BoothTurnout.total_electors).label("total_electors"),
                func.sum(BoothTurnout.total_votes_cast).label("total_votes_cast"),
                func.sum(BoothTurnout.male_voters).label("male_voters"),
                func.sum(BoothTurnout.female_voters).label("female_voters"),
                func.sum(BoothTurnout.other_voters).label("other_voters"),
            )
            .select_from(BoothTurnout)
            .join(Booth, Booth.booth_id == BoothTurnout.booth_id)
            .join(Election, Election.election_id == BoothTurnout.election_id)
            .where(Booth.ac_id == ac_id)
            .group_by(Election.election_id, Election.election_year)
            .order_by(Election.election_year, Election.election_id)
        )
        return [TurnoutTotalsRow.model_validate(dict(r)) for r in self.fetch_rows(stmt)]

    # ----------------------
    # Booths
    # ----------------------
    def _booth_turnout_query(self, election_id: int):
        return (
            select(
                Booth.booth_id,
                Booth.booth_number,
                Booth.booth_name,
                Booth.ac_id,
                BoothTurnout.total_electors,
                BoothTurnout.total_votes_cast,
                BoothTurnout.male_voters,
                BoothTurnout.female_voters,
                BoothTurnout.other_voters,
            )
            .select_from(Booth)
            .outerjoin(
                BoothTurnout,
                and_(BoothTurnout.booth_id == Booth.booth_id, BoothTurnout.election_id == election_id),
            )
        )

    def list_booths(self, ac_id: int, election_id: int) -> List[BoothTurnoutRow]:
        """Booths of a constituency with their turnout, in booth-number order."""
        stmt = self._booth_turnout_query(election_id).where(Booth.ac_id == ac_id)
        return sort_booths(BoothTurnoutRow.model_validate(dict(r)) for r in self.fetch_rows(stmt))

    def list_booths_by_ids(self, booth_ids: Sequence[int], election_id: int) -> List[BoothTurnoutRow]:
        if not booth_ids:
            return []
        stmt = self._booth_turnout_query(election_id).where(Booth.booth_id.in_(list(booth_ids)))
        return sort_booths(BoothTurnoutRow.model_validate(dict(r)) for r in self.fetch_rows(stmt))

    def get_booth(self, booth_id: int, election_id: int) -> Optional[BoothTurnoutRow]:
        stmt = self._booth_turnout_query(election_id).where(Booth.booth_id == booth_id)
        row = self._fetch_one(stmt)
        return BoothTurnoutRow.model_validate(dict(row)) if row else None

    def count_booths(self, ac_id: int) -> int:
        stmt = select(func.count(Booth.booth_id).label("total")).where(Booth.ac_id == ac_id)
        row = self._fetch_one(stmt)
        return int(row["total"]) if row else 0

    def list_booth_turnout_history(self, booth_id: int) -> List[TurnoutTotalsRow]:
        """Turnout of one booth in every known election (zeros where it has no row)."""
        stmt = (
            select(
                Election.election_id,
                Election.election_year,
                BoothTurnout.total_electors,
                BoothTurnout.total_votes_cast,
                BoothTurnout.male_voters,
                BoothTurnout.female_voters,
                BoothTurnout.other_voters,
            )
            .select_from(Election)
            .outerjoin(
                BoothTurnout,
                and_(BoothTurnout.election_id == Election.election_id, BoothTurnout.booth_id == booth_id),
            )
            .order_by(Election.election_year, Election.election_id)
        )
        return [TurnoutTotalsRow.model_validate(dict(r)) for r in self.fetch_rows(stmt)]

    # ----------------------
    # Results
    # ----------------------
    def list_booth_results(
        self,
        election_id: Optional[int],
        ac_id: Optional[int] = None,
        booth_ids: Optional[Sequence[int]] = None,
    ) -> List[BoothResultRow]:
        """Candidate results per booth, with candidate and party names.

        ``election_id=None`` returns every election (used by the trend views).
        """
        stmt = (
            select(
                BoothResult.booth_id,
                BoothResult.election_id,
                BoothResult.candidate_id,
                Candidate.candidate_name,
                Party.party_id,
                Party.party_name,
                Party.party_symbol,
                BoothResult.votes_secured,
                Election.election_year,
            )
            .select_from(BoothResult)
            .join(Candidate, Candidate.candidate_id == BoothResult.candidate_id)
            .outerjoin(Party, Party.party_id == Candidate.party_id)
            .join(Election, Election.election_id == BoothResult.election_id)
            .order_by(BoothResult.booth_id, BoothResult.votes_secured.desc(), BoothResult.candidate_id)
        )
        if election_id is not None:
            stmt = stmt.where(BoothResult.election_id == election_id)
        if ac_id is not None:
            stmt = stmt.join(Booth, Booth.booth_id == BoothResult.booth_id).where(Booth.ac_id == ac_id)
        if booth_ids is not None:
            if not booth_ids:
                return []
            stmt = stmt.where(BoothResult.booth_id.in_(list(booth_ids)))
        return [BoothResultRow.model_validate(dict(r)) for r in self.fetch_rows(stmt)]

    def list_constituency_results_history(self, ac_id: int) -> List[BoothResultRow]:
        return self.list_booth_results(election_id=None, ac_id=ac_id)

    # ----------------------
    # Candidates
    # ----------------------
    def get_candidate(self, candidate_id: int) -> Optional[CandidateRow]:
        stmt = (
            select(
                Candidate.candidate_id,
                Candidate.candidate_name,
                Party.party_id,
                Party.party_name,
                Party.party_symbol,
                Candidate.age,
                Candidate.gender,
                Candidate.education,
                Candidate.criminal_cases,
                Candidate.assets,
                Candidate.liabilities,
            )
            .select_from(Candidate)
            .outerjoin(Party, Party.party_id == Candidate.party_id)
            .where(Candidate.candidate_id == candidate_id)
        )
        row = self._fetch_one(stmt)
        return CandidateRow.model_validate(dict(row)) if row else None

    def list_candidate_results(self, candidate_id: int, election_id: int) -> List[ConstituencyVotesRow]:
        """Votes a candidate secured per constituency."""
        stmt = (
            select(AC.ac_id, AC.ac_name, func.sum(BoothResult.votes_secured).label("votes"))
            .select_from(BoothResult)
            .join(Booth, Booth.booth_id == BoothResult.booth_id)
            .join(AC, AC.ac_id == Booth.ac_id)
            .where(BoothResult.candidate_id == candidate_id, BoothResult.election_id == election_id)
            .group_by(AC.ac_id, AC.ac_name)
        )
        return [ConstituencyVotesRow.model_validate(dict(r)) for r in self.fetch_rows(stmt)]

    def get_constituency_vote_totals(self, ac_ids: Sequence[int], election_id: int) -> Dict[int, int]:
        """Total votes secured by all candidates, per constituency."""
        if not ac_ids:
            return {}
        stmt = (
            select(Booth.ac_id, func.sum(BoothResult.votes_secured).label("votes"))
            .select_from(BoothResult)
            .join(Booth, Booth.booth_id == BoothResult.booth_id)
            .where(Booth.ac_id.in_(list(ac_ids)), BoothResult.election_id == election_id)
            .group_by(Booth.ac_id)
        )
        return {int(r["ac_id"]): int(r["votes"] or 0) for r in self.fetch_rows(stmt)}
