"""Fallback chain tiers and the transitions between them."""

from enum import Enum
from typing import Optional

from resolver.config.models import ModelRole


class Tier(str, Enum):
    """One priority level of the fallback chain, in escalation order."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    REASONING = "reasoning"
    WEB = "web"

    @property
    def role(self) -> ModelRole:
        """Model role whose configured models serve this tier."""
        return _TIER_ROLES[self]

    @property
    def is_conditional(self) -> bool:
        """Conditional tiers run only when the escalation heuristic asks for them."""
        return self is Tier.REASONING

    def next(self) -> Optional["Tier"]:
        """Tier to escalate to when this one is insufficient (None after WEB)."""
        return _TRANSITIONS[self]


_TIER_ROLES = {
    Tier.PRIMARY: ModelRole.PRIMARY,
    Tier.SECONDARY: ModelRole.SECONDARY,
    Tier.REASONING: ModelRole.REASONING,
    Tier.WEB: ModelRole.WEB_PROCESSING,
}

_TRANSITIONS = {
    Tier.PRIMARY: Tier.SECONDARY,
    Tier.SECONDARY: Tier.REASONING,
    Tier.REASONING: Tier.WEB,
    Tier.WEB: None,
}

FIRST_TIER = Tier.PRIMARY
