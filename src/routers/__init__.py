# src/routers/__init__.py
from .states.main import router as states_router
from .constituencies.main import router as constituencies_router
from .elections.main import router as elections_router
from .booths.main import router as booths_router
from .booth_analysis.main import router as booth_analysis_router
from .candidates.main import router as candidates_router
__all__ = [
    "states_router",
    "constituencies_router",
    "elections_router",
    "booths_router",
    "booth_analysis_router",
    "candidates_router",
           ]
