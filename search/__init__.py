"""Search engines used by the timetable planner."""

from .backtrack import SearchConfig, SearchResult, enumerate_assignments

__all__ = ["SearchConfig", "SearchResult", "enumerate_assignments"]
