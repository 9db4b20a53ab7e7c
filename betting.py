"""
Bet sizing from the Hi‑Lo true count.

Each +1 of true count is worth roughly 0.5% of player advantage.  The
Kelly policies bet a quarter of the Kelly fraction ``advantage / 1.3``,
1.3 being the approximate variance of a hand of Blackjack.
"""

from dataclasses import dataclass
import math
from typing import Callable, Dict

ADVANTAGE_PER_TRUE_COUNT = 0.005
BLACKJACK_VARIANCE = 1.3
KELLY_MULTIPLIER = 0.25

# Table limits for the standalone bankroll-relative recommendation.
TABLE_MIN_BET = 5.0
TABLE_MAX_BET = 100.0
MAX_BANKROLL_FRACTION = 0.10
BET_UNIT = 5.0


@dataclass(frozen=True)
class BetConfig:
    min_bet: float
    max_bet: float
    initial_bankroll: float

    def __post_init__(self) -> None:
        if self.min_bet <= 0 or self.max_bet <= 0 or self.initial_bankroll <= 0:
            raise ValueError("bets and bankroll must be positive")
        if self.min_bet > self.max_bet:
            raise ValueError("min_bet cannot exceed max_bet")


def fractional_kelly(true_count: float) -> float:
    """Quarter-Kelly fraction of bankroll for a true count; 0 without an edge."""
    advantage = true_count * ADVANTAGE_PER_TRUE_COUNT
    if advantage <= 0:
        return 0.0
    return advantage / BLACKJACK_VARIANCE * KELLY_MULTIPLIER


def flat_bet(true_count: float, config: BetConfig) -> float:
    return config.min_bet


def kelly_bet(true_count: float, config: BetConfig) -> float:
    """Scale between the table bounds by the fractional Kelly figure."""
    fraction = fractional_kelly(true_count)
    if fraction <= 0:
        return config.min_bet
    bet = config.min_bet + (config.max_bet - config.min_bet) * fraction
    return min(bet, config.max_bet)


def progressive_bet(true_count: float, config: BetConfig) -> float:
    if true_count >= 3:
        return config.min_bet * 3
    if true_count >= 2:
        return config.min_bet * 2
    if true_count >= 1:
        return config.min_bet * 1.5
    return config.min_bet


BETTING: Dict[str, Callable[[float, BetConfig], float]] = {
    "flat": flat_bet,
    "kelly": kelly_bet,
    "progressive": progressive_bet,
}


def bet_for_hand(true_count: float, bankroll: float, config: BetConfig, betting: str) -> float:
    """Bet for one simulated hand, kept within the table and the bankroll."""
    try:
        policy = BETTING[betting]
    except KeyError:
        raise ValueError(f"unknown betting policy {betting!r}, expected one of {sorted(BETTING)}") from None
    bet = policy(true_count, config)
    bet = min(bet, bankroll, config.max_bet)
    return max(config.min_bet, bet)


def kelly_bankroll_bet(true_count: float, bankroll: float) -> float:
    """
    Recommended bet as a share of the bankroll, kept between the table
    minimum and the smaller of 10% of the bankroll and the table maximum,
    rounded to the nearest 5.
    """
    fraction = fractional_kelly(true_count)
    if fraction <= 0:
        return TABLE_MIN_BET
    bet = bankroll * fraction
    bet = max(TABLE_MIN_BET, bet)
    bet = min(bet, bankroll * MAX_BANKROLL_FRACTION)
    bet = min(bet, TABLE_MAX_BET)
    return math.floor(bet / BET_UNIT + 0.5) * BET_UNIT
