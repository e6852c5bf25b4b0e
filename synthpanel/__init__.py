"""synthpanel — synthetic investor panels for startup products.

Generates a fresh batch of fictional investor personas, has each one
swipe on a founder's product, and aggregates the verdicts into like
rates, top concerns, sentiment and recommendations.
"""

__version__ = "0.1.0"
