"""
Strategy decisions for the player's first action in a hand of Blackjack.

Decisions are made from the hand total, whether the hand is soft, the
dealer's upcard value (Ace counts 11) and whether doubling is still
allowed.  Every decision is one of :class:`Action`.

Strategies included:

* ``basic`` – Basic Strategy table, ignoring the count.
* ``ai`` – Basic Strategy plus a small set of Hi‑Lo count deviations.
* ``advanced`` – Same decisions as ``ai``.

The strategies are exported in the ``STRATEGIES`` dictionary, mapping
each name to whether count deviations are applied.
"""

from enum import Enum
from typing import Dict


class Action(str, Enum):
    HIT = "HIT"
    STAND = "STAND"
    DOUBLE = "DOUBLE"


def basic_strategy(total: int, dealer_up: int, is_soft: bool, can_double: bool = True) -> Action:
    """
    Simplified Basic Strategy covering soft and hard totals.

    :param total: The player's hand total.
    :param dealer_up: Dealer's upcard value, 2 to 11.
    :param is_soft: Whether an Ace in the hand is counted as 11.
    :param can_double: Only true for a two-card hand that has not acted.
    :returns: One of HIT, STAND or DOUBLE.
    """
    if is_soft:
        if total >= 19:
            return Action.STAND
        if total == 18:
            if can_double and 2 <= dealer_up <= 6:
                return Action.DOUBLE
            if dealer_up in (7, 8):
                return Action.STAND
            return Action.HIT  # vs 9, 10, A
        if total == 17:
            return Action.DOUBLE if can_double and 3 <= dealer_up <= 6 else Action.HIT
        if total in (15, 16):
            return Action.DOUBLE if can_double and 4 <= dealer_up <= 6 else Action.HIT
        if total in (13, 14):
            return Action.DOUBLE if can_double and 5 <= dealer_up <= 6 else Action.HIT
        return Action.HIT

    # Hard totals
    if total >= 17:
        return Action.STAND
    if 13 <= total <= 16:
        return Action.STAND if dealer_up <= 6 else Action.HIT
    if total == 12:
        return Action.STAND if 4 <= dealer_up <= 6 else Action.HIT
    if total == 11:
        return Action.DOUBLE if can_double else Action.HIT
    if total == 10:
        return Action.DOUBLE if can_double and dealer_up <= 9 else Action.HIT
    if total == 9:
        return Action.DOUBLE if can_double and 3 <= dealer_up <= 6 else Action.HIT
    return Action.HIT


def apply_deviations(
    action: Action, total: int, dealer_up: int, true_count: float, can_double: bool = True
) -> Action:
    """
    Override a Basic Strategy action for a handful of hands when the true
    count is +2 or higher, or -2 or lower.
    """
    if true_count >= 2:
        if total in (15, 16) and dealer_up == 10:
            return Action.STAND
        if total == 12 and dealer_up in (2, 3):
            return Action.STAND
        if can_double and total == 10 and dealer_up == 10:
            return Action.DOUBLE
        if can_double and total == 9 and dealer_up == 2:
            return Action.DOUBLE
    elif true_count <= -2:
        if total == 12 and 4 <= dealer_up <= 6:
            return Action.HIT
        if total == 13 and dealer_up == 2:
            return Action.HIT
    return action


STRATEGIES: Dict[str, bool] = {
    "basic": False,
    "ai": True,
    "advanced": True,
}


def recommended_action(
    total: int,
    dealer_up: int,
    is_soft: bool,
    can_double: bool = True,
    true_count: float = 0.0,
    strategy: str = "basic",
) -> Action:
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown strategy {strategy!r}, expected one of {sorted(STRATEGIES)}")
    action = basic_strategy(total, dealer_up, is_soft, can_double)
    if STRATEGIES[strategy]:
        action = apply_deviations(action, total, dealer_up, true_count, can_double)
    return action
