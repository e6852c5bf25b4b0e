"""Investor reputation scoring.

Deterministic, no oracle involved. Each activity contributes weighted
points up to a per-factor cap; account age adds a small bonus.
"""

from synthpanel.schemas.enums import ReputationRank
from synthpanel.schemas.insights import ActivityCounts, ReputationBreakdown, ReputationScore

# factor -> (points per unit, cap)
REVIEW_WEIGHT = (5.0, 30.0)
DETAILED_REVIEW_WEIGHT = (4.0, 20.0)
INTERACTION_WEIGHT = (0.5, 20.0)
MESSAGE_WEIGHT = (1.0, 15.0)
SUPER_LIKE_WEIGHT = (2.0, 10.0)

# (minimum age in days, exclusive; bonus points)
ACCOUNT_AGE_BONUSES = ((30, 5.0), (7, 3.0), (1, 1.0))

RANK_THRESHOLDS = (
    (100.0, ReputationRank.ELITE),
    (75.0, ReputationRank.EXPERT),
    (50.0, ReputationRank.ADVANCED),
    (25.0, ReputationRank.INTERMEDIATE),
    (10.0, ReputationRank.BEGINNER),
)

DETAILED_REVIEW_MIN_CHARS = 100


def _capped(count: int, weight: tuple[float, float]) -> float:
    per_unit, cap = weight
    return min(count * per_unit, cap)


def account_age_bonus(age_days: int) -> float:
    for min_days, bonus in ACCOUNT_AGE_BONUSES:
        if age_days > min_days:
            return bonus
    return 0.0


def rank_for_score(score: float) -> ReputationRank:
    for threshold, rank in RANK_THRESHOLDS:
        if score >= threshold:
            return rank
    return ReputationRank.NEWCOMER


def is_detailed_review(text: str | None) -> bool:
    """A review counts as detailed when its text exceeds 100 characters."""
    return bool(text) and len(text) > DETAILED_REVIEW_MIN_CHARS


def activity_from_reviews(review_texts: list[str | None], **counts: int) -> ActivityCounts:
    """Build ActivityCounts from raw review texts plus the other tallies.

    Every review counts toward review_count; those passing
    is_detailed_review also count toward detailed_review_count.
    """
    return ActivityCounts(
        review_count=len(review_texts),
        detailed_review_count=sum(1 for text in review_texts if is_detailed_review(text)),
        **counts,
    )


def compute_reputation(activity: ActivityCounts) -> ReputationScore:
    """Score an account's marketplace activity.

    Args:
        activity: Raw activity tallies for one account.

    Returns:
        ReputationScore with total, rank and per-factor breakdown.
    """
    breakdown = ReputationBreakdown(
        reviews=_capped(activity.review_count, REVIEW_WEIGHT),
        detailed_reviews=_capped(activity.detailed_review_count, DETAILED_REVIEW_WEIGHT),
        interactions=_capped(activity.interaction_count, INTERACTION_WEIGHT),
        messages=_capped(activity.message_count, MESSAGE_WEIGHT),
        super_likes=_capped(activity.super_like_count, SUPER_LIKE_WEIGHT),
        account_age=account_age_bonus(activity.account_age_days),
    )
    score = (
        breakdown.reviews
        + breakdown.detailed_reviews
        + breakdown.interactions
        + breakdown.messages
        + breakdown.super_likes
        + breakdown.account_age
    )
    return ReputationScore(score=score, rank=rank_for_score(score), breakdown=breakdown)
