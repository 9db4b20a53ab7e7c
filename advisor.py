"""
Advice for a hand being played at a real table.

:func:`advise` turns what the player has seen (remaining shoe, running
count, their cards and the dealer's upcard) into a recommended action, a
rough chance of winning and a bankroll-relative Kelly bet.
:class:`CountingSession` keeps that information while cards are entered
by hand, one at a time, across rounds.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from betting import kelly_bankroll_bet
from game import HIGH_CARDS, InvalidState, Shoe, evaluate, hi_lo_value, point_value, true_count
from strategies import Action, basic_strategy, recommended_action

NATURAL_WIN_PROBABILITY = 0.9
EXPECTED_HIGH_CARD_RATIO = 20 / 52


@dataclass(frozen=True)
class Advice:
    action: Action
    basic_action: Action
    win_probability: float
    recommended_bet: float
    true_count: float
    cards_remaining: int
    decks_remaining: float
    penetration: float


def high_card_ratio(shoe: Shoe) -> float:
    remaining = shoe.remaining_total()
    if remaining == 0:
        return 0.0
    return sum(shoe.count(rank) for rank in HIGH_CARDS) / remaining


def win_probability(player_cards: List[str], dealer_card: str, tc: float, shoe: Shoe) -> float:
    """
    Heuristic chance of winning the hand.  Starts from a base figure for
    the player's total against a weak (2-6) or strong (7-A) upcard, then
    shifts it by the true count and by how rich the shoe is in tens and
    Aces.
    """
    if not player_cards:
        return 0.0
    total, soft = evaluate(player_cards)
    if len(player_cards) == 2 and total == 21:
        return NATURAL_WIN_PROBABILITY
    if total > 21:
        return 0.0

    strong_dealer = point_value(dealer_card) >= 7
    if total >= 17:
        base = (0.4 if strong_dealer else 0.6) + (total - 17) * 0.05
    elif total >= 12:
        base = (0.25 if strong_dealer else 0.45) + (total - 12) * 0.03
    else:
        base = 0.4
    if soft:
        base += 0.05

    count_adjustment = tc * 0.01
    high_card_adjustment = (high_card_ratio(shoe) - EXPECTED_HIGH_CARD_RATIO) * 0.5
    return max(0.0, min(1.0, base + count_adjustment + high_card_adjustment))


def advise(
    shoe: Shoe,
    player_cards: List[str],
    dealer_card: Optional[str],
    running_count: int,
    bankroll: float,
    strategy: str = "ai",
) -> Advice:
    tc = true_count(running_count, shoe)
    if player_cards and dealer_card is not None:
        total, soft = evaluate(player_cards)
        up = point_value(dealer_card)
        can_double = len(player_cards) == 2
        basic = basic_strategy(total, up, soft, can_double)
        action = recommended_action(total, up, soft, can_double, tc, strategy)
        probability = win_probability(player_cards, dealer_card, tc, shoe)
    else:
        basic = action = Action.STAND
        probability = 0.0
    return Advice(
        action=action,
        basic_action=basic,
        win_probability=probability,
        recommended_bet=kelly_bankroll_bet(tc, bankroll),
        true_count=tc,
        cards_remaining=shoe.remaining_total(),
        decks_remaining=shoe.decks_remaining(),
        penetration=shoe.penetration(),
    )


@dataclass(frozen=True)
class RoundSummary:
    round_number: int
    player_total: int
    dealer_card: Optional[str]
    action: Action
    win_probability: float
    optimal_bet: float


class CountingSession:
    """
    Manual card counting across rounds.  Every card entered for the
    player or the dealer is removed from the shoe and counted; removing it
    again puts it back.
    """

    def __init__(self, num_decks: int = 6, bankroll: float = 1000.0, strategy: str = "ai") -> None:
        self.num_decks = num_decks
        self.bankroll = bankroll
        self.strategy = strategy
        self.reset()

    def reset(self) -> None:
        self.shoe = Shoe(self.num_decks)
        self.running_count = 0
        self.player_cards: List[str] = []
        self.dealer_card: Optional[str] = None
        self.round_number = 1
        self.history: List[RoundSummary] = []

    def _take(self, rank: str) -> None:
        if self.shoe.count(rank) == 0:
            raise InvalidState(f"no {rank} left in the shoe")
        self.shoe.consume(rank)
        self.running_count += hi_lo_value(rank)

    def _give_back(self, rank: str) -> None:
        self.shoe.restore(rank)
        self.running_count -= hi_lo_value(rank)

    def add_player_card(self, rank: str) -> None:
        self._take(rank)
        self.player_cards.append(rank)

    def remove_player_card(self, index: int) -> str:
        rank = self.player_cards.pop(index)
        self._give_back(rank)
        return rank

    def set_dealer_card(self, rank: str) -> None:
        self._take(rank)
        if self.dealer_card is not None:
            self._give_back(self.dealer_card)
        self.dealer_card = rank

    def clear_dealer_card(self) -> None:
        if self.dealer_card is not None:
            self._give_back(self.dealer_card)
            self.dealer_card = None

    @property
    def true_count(self) -> float:
        return true_count(self.running_count, self.shoe)

    def advice(self) -> Advice:
        return advise(
            self.shoe, self.player_cards, self.dealer_card, self.running_count, self.bankroll, self.strategy
        )

    def next_round(self) -> Optional[RoundSummary]:
        """
        Close the current round.  Seen cards stay out of the shoe; the hand
        is cleared.  Returns the summary recorded for the round, if any.
        """
        summary = None
        if self.player_cards and self.dealer_card is not None:
            advice = self.advice()
            summary = RoundSummary(
                round_number=self.round_number,
                player_total=evaluate(self.player_cards).total,
                dealer_card=self.dealer_card,
                action=advice.action,
                win_probability=advice.win_probability,
                optimal_bet=advice.recommended_bet,
            )
            self.history.append(summary)
        self.player_cards = []
        self.dealer_card = None
        self.round_number += 1
        return summary

    def counts(self) -> Dict[str, int]:
        return self.shoe.counts
