"""Tests for subscription-tier feature gates."""

import pytest

from synthpanel.config.access import AccessPolicy, required_tier, tier_allows
from synthpanel.schemas.enums import SubscriptionTier


class TestRequiredTier:
    def test_founder_feature(self):
        assert required_tier("synthetic_test") == SubscriptionTier.FOUNDER

    def test_investor_feature(self):
        assert required_tier("ai_match_scoring") == SubscriptionTier.INVESTOR

    def test_unknown_feature_is_free(self):
        assert required_tier("teleport") == SubscriptionTier.FREE


class TestTierAllows:
    @pytest.mark.parametrize("tier", list(SubscriptionTier))
    def test_free_features_open_to_all(self, tier):
        assert tier_allows(tier, SubscriptionTier.FREE)

    def test_same_tier_allowed(self):
        assert tier_allows(SubscriptionTier.FOUNDER, SubscriptionTier.FOUNDER)

    def test_separate_paths_not_a_ladder(self):
        assert not tier_allows(SubscriptionTier.INVESTOR, SubscriptionTier.FOUNDER)
        assert not tier_allows(SubscriptionTier.FOUNDER, SubscriptionTier.INVESTOR)
        assert not tier_allows(SubscriptionTier.FREE, SubscriptionTier.FOUNDER)


class TestAccessPolicy:
    def test_open_policy_allows_everything(self):
        decision = AccessPolicy().check("synthetic_test", SubscriptionTier.FREE)
        assert decision.has_access is True
        assert decision.show_paywall is False
        assert decision.required_tier == SubscriptionTier.FOUNDER

    def test_enforced_policy_blocks_wrong_tier(self):
        decision = AccessPolicy(enforce_paywall=True).check("synthetic_test", SubscriptionTier.INVESTOR)
        assert decision.has_access is False
        assert decision.show_paywall is True
        assert decision.user_tier == SubscriptionTier.INVESTOR

    def test_enforced_policy_allows_matching_tier(self):
        decision = AccessPolicy(enforce_paywall=True).check("purchase_intent", SubscriptionTier.INVESTOR)
        assert decision.has_access is True
