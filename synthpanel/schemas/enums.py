"""Shared enumerations for synthpanel schemas.

All enums used across the system are defined here to ensure
consistency and avoid circular imports.
"""

from enum import Enum


class Decision(str, Enum):
    """Swipe decision a persona makes on a product."""
    LIKE = "like"
    PASS = "pass"
    SUPER_LIKE = "super_like"


class RiskTolerance(str, Enum):
    """Risk appetite of an investor persona."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class InvestmentStage(str, Enum):
    """Funding stages an investor writes checks into."""
    PRE_SEED = "pre_seed"
    ANGEL = "angel"
    SEED = "seed"
    SERIES_A = "series_a"
    SERIES_B = "series_b"
    GROWTH = "growth"


class UserType(str, Enum):
    """Marketplace role of an account."""
    FOUNDER = "founder"
    INVESTOR = "investor"
    EARLY_ADOPTER = "early_adopter"


class SubscriptionTier(str, Enum):
    """Paid plan attached to an account."""
    FREE = "free"
    FOUNDER = "founder"
    INVESTOR = "investor"


class PricingType(str, Enum):
    """How a product charges its customers."""
    ONE_TIME = "one_time"
    SUBSCRIPTION = "subscription"
    EQUITY = "equity"
    PARTNERSHIP = "partnership"


class ProductStage(str, Enum):
    """Maturity of a product."""
    IDEA = "idea"
    MVP = "mvp"
    EARLY_REVENUE = "early_revenue"
    GROWTH = "growth"


class SyntheticTestStatus(str, Enum):
    """Lifecycle status of a synthetic test record."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ReputationRank(int, Enum):
    """Reputation rank bands, lowest to highest."""
    NEWCOMER = 0
    BEGINNER = 1
    INTERMEDIATE = 2
    ADVANCED = 3
    EXPERT = 4
    ELITE = 5


class GTMPriority(str, Enum):
    """Impact ranking of a go-to-market strategy."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
