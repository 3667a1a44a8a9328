"""State layer.

The registry holds one timing record per transponder; the policy module
decides how a passing changes it. Only the passing processor and the expiry
sweeper mutate the registry.
"""

from pylaptime.state.policy import OutOfOrderPolicy, PassingOutcome, classify_interval
from pylaptime.state.registry import TransponderRegistry

__all__ = [
    "OutOfOrderPolicy",
    "PassingOutcome",
    "TransponderRegistry",
    "classify_interval",
]
