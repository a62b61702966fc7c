from .rows import (
    StateRow,
    ConstituencyRow,
    ConstituencySummaryRow,
    BoothTurnoutRow,
    BoothResultRow,
    ElectionRow,
    TurnoutTotalsRow,
    StateStatsRow,
    CandidateRow,
    ConstituencyVotesRow,
)

__all__ = [
    "StateRow",
    "ConstituencyRow",
    "ConstituencySummaryRow",
    "BoothTurnoutRow",
    "BoothResultRow",
    "ElectionRow",
    "TurnoutTotalsRow",
    "StateStatsRow",
    "CandidateRow",
    "ConstituencyVotesRow",
]
