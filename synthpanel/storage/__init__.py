"""Storage layer — persistence for finished synthetic tests.

The store is append-only: a test record is never modified after
creation.
"""

from synthpanel.storage.test_store import SyntheticTestStore

__all__ = [
    "SyntheticTestStore",
]
