"""Engine package - single pass runner and fixed-point driver."""

from .results import Results, RunnerResults
from .runner import Runner, Outcome, evaluate_rule, evaluate_condition
from .engine import RulesEngine

__all__ = [
    # Results
    "Results",
    "RunnerResults",
    # Runner
    "Runner",
    "Outcome",
    "evaluate_rule",
    "evaluate_condition",
    # Engine
    "RulesEngine",
]
