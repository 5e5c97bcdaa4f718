"""Centralized role normalization utility.

Two mappings live here:
- ROLE_ALIASES: lenient, for user/draft-watcher input ("JNG", "adc", "supp").
- PROVIDER_POSITIONS: closed, for the match provider's teamPosition labels.
  Anything outside it is treated as unknown and excluded from matching.
"""

from typing import Optional

from pick_assistant.errors import InputError
from pick_assistant.models.draft import Role

# Comprehensive mapping from any known role format to canonical Role
ROLE_ALIASES: dict[str, Role] = {
    # Top lane variations
    "top": Role.TOP,
    "top laner": Role.TOP,
    "toplane": Role.TOP,

    # Jungle variations
    "jungle": Role.JUNGLE,
    "jungler": Role.JUNGLE,
    "jng": Role.JUNGLE,
    "jg": Role.JUNGLE,

    # Mid lane variations
    "mid": Role.MID,
    "middle": Role.MID,
    "mid laner": Role.MID,
    "midlane": Role.MID,

    # Bot/ADC variations - all normalize to bot
    "bot": Role.BOT,
    "adc": Role.BOT,
    "bottom": Role.BOT,
    "bot laner": Role.BOT,
    "ad carry": Role.BOT,
    "marksman": Role.BOT,

    # Support variations
    "support": Role.SUPPORT,
    "sup": Role.SUPPORT,
    "supp": Role.SUPPORT,
    "utility": Role.SUPPORT,
}

# Match-V5 teamPosition values. Empty string / "Invalid" are deliberately absent.
PROVIDER_POSITIONS: dict[str, Role] = {
    "TOP": Role.TOP,
    "JUNGLE": Role.JUNGLE,
    "MIDDLE": Role.MID,
    "BOTTOM": Role.BOT,
    "UTILITY": Role.SUPPORT,
}

# Role ordering for consistent display, sorting and warmup
ROLE_ORDER = [Role.TOP, Role.JUNGLE, Role.MID, Role.BOT, Role.SUPPORT]


def normalize_role(role: Optional[str]) -> Optional[Role]:
    """Normalize a role string to a canonical Role.

    Examples:
        >>> normalize_role("JNG")
        <Role.JUNGLE: 'jungle'>
        >>> normalize_role("ADC")
        <Role.BOT: 'bot'>
        >>> normalize_role("feeder") is None
        True
    """
    if role is None:
        return None
    if isinstance(role, Role):
        return role
    return ROLE_ALIASES.get(role.strip().lower())


def normalize_role_strict(role: Optional[str]) -> Role:
    """Normalize a role string, raising InputError if unknown."""
    normalized = normalize_role(role)
    if normalized is None:
        raise InputError(f"Unknown role: {role}")
    return normalized


def normalize_position(position: Optional[str]) -> Optional[Role]:
    """Map a provider teamPosition label to Role; unmapped labels give None."""
    if not position:
        return None
    return PROVIDER_POSITIONS.get(position)
