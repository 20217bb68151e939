"""Plans — starting accounts plus recurring rules, and how to load them."""

from .checkpoints import stepped_checkpoints, yearly_checkpoints
from .loader import load_plan, parse_plan
from .models import InterestRule, Plan, TransferRule

__all__ = [
    "InterestRule",
    "Plan",
    "TransferRule",
    "load_plan",
    "parse_plan",
    "stepped_checkpoints",
    "yearly_checkpoints",
]
