"""Utility modules for pick_assistant."""

from pick_assistant.utils.rate_limiter import RateLimiter
from pick_assistant.utils.role_normalizer import (
    PROVIDER_POSITIONS,
    ROLE_ALIASES,
    ROLE_ORDER,
    normalize_position,
    normalize_role,
    normalize_role_strict,
)

__all__ = [
    "RateLimiter",
    "PROVIDER_POSITIONS",
    "ROLE_ALIASES",
    "ROLE_ORDER",
    "normalize_position",
    "normalize_role",
    "normalize_role_strict",
]
