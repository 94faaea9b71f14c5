"""
Utilization status classification.

Rules are evaluated in order and the first match wins:

1. allocation > 100 or utilization > 100  -> overloaded
2. 100 <= utilization <= 120              -> at-risk
3. allocation < 50 or utilization < 50    -> underloaded
4. anything else                          -> optimal

Rule 1 already takes every utilization above 100, so rule 2 only fires at
exactly 100.
"""

from enum import Enum


class CapacityStatus(str, Enum):
    """Capacity status of one person for one period."""
    OVERLOADED = "overloaded"
    AT_RISK = "at-risk"
    UNDERLOADED = "underloaded"
    OPTIMAL = "optimal"


def classify(utilization_percent: float, allocation_percent: float) -> CapacityStatus:
    if allocation_percent > 100 or utilization_percent > 100:
        return CapacityStatus.OVERLOADED

    if 100 <= utilization_percent <= 120:
        return CapacityStatus.AT_RISK

    if allocation_percent < 50 or utilization_percent < 50:
        return CapacityStatus.UNDERLOADED

    return CapacityStatus.OPTIMAL
