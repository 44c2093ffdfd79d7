"""Domain logic module - pure business logic without HA dependencies.

All modules in this package contain pure functions that:
- Take inputs → produce outputs
- Have no side effects
- Don't access HA directly
- Are easy to unit test
"""

from .enumerator import enumerate_plans
from .optimizer import ChargePlanOptimizer
from .window_finder import find_cheapest_window

__all__ = ["ChargePlanOptimizer", "enumerate_plans", "find_cheapest_window"]
