"""synthpanel orchestration layer.

Runs one synthetic test:
  access check → persona generation → evaluation fan-out → aggregation → persistence
"""

from synthpanel.orchestration.runner import SyntheticTestRunner

__all__ = [
    "SyntheticTestRunner",
]
