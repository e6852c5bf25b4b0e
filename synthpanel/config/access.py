"""Subscription-tier feature gates.

Founder and investor are separate subscription paths, not a ladder:
a founder subscription does not unlock investor features and vice
versa. Only "free" features are open to everyone.

The policy is an explicit value built once per request (from
settings) and handed to whoever needs to check access. With
enforce_paywall=False every gate is open, which is how the product
runs until billing is wired up.
"""

from pydantic import BaseModel, ConfigDict, Field

from synthpanel.schemas.enums import SubscriptionTier

FEATURE_GATES: dict[str, SubscriptionTier] = {
    # Founder features
    "create_product": SubscriptionTier.FOUNDER,
    "market_analysis": SubscriptionTier.FOUNDER,
    "synthetic_test": SubscriptionTier.FOUNDER,
    "product_analytics": SubscriptionTier.FOUNDER,
    "founder_messaging": SubscriptionTier.FOUNDER,
    # Investor features
    "ai_match_scoring": SubscriptionTier.INVESTOR,
    "due_diligence": SubscriptionTier.INVESTOR,
    "purchase_intent": SubscriptionTier.INVESTOR,
    "advanced_filters": SubscriptionTier.INVESTOR,
    "investor_messaging": SubscriptionTier.INVESTOR,
    "investment_analytics": SubscriptionTier.INVESTOR,
    # Free features
    "browse_products": SubscriptionTier.FREE,
    "basic_profile": SubscriptionTier.FREE,
    "swipe_interface": SubscriptionTier.FREE,
}


def required_tier(feature: str) -> SubscriptionTier:
    """Tier a feature requires. Unknown features are free."""
    return FEATURE_GATES.get(feature, SubscriptionTier.FREE)


def tier_allows(user_tier: SubscriptionTier, needed: SubscriptionTier) -> bool:
    """True if user_tier satisfies needed."""
    if needed == SubscriptionTier.FREE:
        return True
    return user_tier == needed


class AccessDecision(BaseModel):
    """Outcome of a single feature gate check."""

    model_config = ConfigDict(frozen=True)

    feature: str
    has_access: bool
    show_paywall: bool
    user_tier: SubscriptionTier
    required_tier: SubscriptionTier


class AccessPolicy(BaseModel):
    """Feature gate policy resolved once per request."""

    model_config = ConfigDict(frozen=True)

    enforce_paywall: bool = Field(
        default=False,
        description="When False every feature is open regardless of tier",
    )

    def check(self, feature: str, user_tier: SubscriptionTier) -> AccessDecision:
        needed = required_tier(feature)
        allowed = tier_allows(user_tier, needed) or not self.enforce_paywall
        return AccessDecision(
            feature=feature,
            has_access=allowed,
            show_paywall=not allowed,
            user_tier=user_tier,
            required_tier=needed,
        )
