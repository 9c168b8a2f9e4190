"""UI utilities (validators, result caching)."""

from .schedule_cache import cached_run, compute_input_hash

__all__ = ["cached_run", "compute_input_hash"]
