"""Stateful tools. Each one owns a store namespace and writes through on every command."""

from .aps import ApsCalculator
from .checklist import Checklist, nsfas_readiness
from .matrix import DecisionMatrix
from .planner import WeeklyPlanner
from .wizard import FundingWizard

__all__ = [
    "ApsCalculator",
    "Checklist",
    "DecisionMatrix",
    "FundingWizard",
    "WeeklyPlanner",
    "nsfas_readiness",
]
