"""
Core game logic for simulating hands of Blackjack without suits and with
Hi‑Lo counting.

This module defines the card model, the shoe, the Hi‑Lo count helpers and
the resolution of a single hand.  Card ranks are tracked without their
suits; each deck contributes four copies of each rank into the shoe, and
the shoe only stores how many of each rank are left.  The probability of
drawing each rank therefore diminishes appropriately when a particular
rank is dealt.

A hand supports three player actions: hit, stand and double.  Doubling
draws exactly one card and then stands.  There is no split, surrender or
insurance.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple
import random

from betting import BetConfig, bet_for_hand
from strategies import Action, recommended_action


# ----- Card definitions -----
RANKS: List[str] = ["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]
VALUES = {
    "2": 2,
    "3": 3,
    "4": 4,
    "5": 5,
    "6": 6,
    "7": 7,
    "8": 8,
    "9": 9,
    "10": 10,
    "J": 10,
    "Q": 10,
    "K": 10,
    "A": 11,
}
HIGH_CARDS = ("10", "J", "Q", "K", "A")

CARDS_PER_DECK = 52
DEALER_MAX_DRAWS = 10
BLACKJACK_PAYOUT = 1.5


class GameError(Exception):
    """Base class for errors raised while playing a hand."""


class InsufficientCards(GameError):
    """The shoe does not hold enough cards to deal a hand."""


class InvalidState(GameError):
    """The shoe was asked to do something its counts do not allow."""


def point_value(rank: str) -> int:
    """Return the Blackjack point value of a rank (Aces count 11)."""
    return VALUES[rank]


def hi_lo_value(rank: str) -> int:
    """Return the Hi‑Lo count value for a given rank."""
    if rank in ("2", "3", "4", "5", "6"):
        return 1
    if rank in ("7", "8", "9"):
        return 0
    if rank in HIGH_CARDS:
        return -1
    raise KeyError(rank)


class HandValue(NamedTuple):
    total: int
    is_soft: bool


def evaluate(cards: List[str]) -> HandValue:
    """
    Compute the Blackjack value of a hand, counting Aces as 11 and then
    as 1, one at a time, while the hand would otherwise bust.  The hand is
    soft when at least one Ace is still counted as 11.
    """
    total = 0
    aces = 0
    for r in cards:
        if r == "A":
            aces += 1
        total += VALUES[r]
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1
    return HandValue(total, aces > 0)


def is_blackjack(cards: List[str]) -> bool:
    return len(cards) == 2 and evaluate(cards).total == 21


class Shoe:
    """
    A shoe containing multiple decks of 52 cards, stored as the number of
    cards of each rank still left to deal.  Suits are omitted.
    """

    def __init__(self, num_decks: int = 6, counts: Optional[Mapping[str, int]] = None) -> None:
        if num_decks < 1:
            raise ValueError("num_decks must be at least 1")
        self.num_decks = num_decks
        self._counts: Dict[str, int] = {}
        if counts is None:
            self.reshuffle()
        else:
            self._load(counts)

    def _load(self, counts: Mapping[str, int]) -> None:
        per_rank = self.num_decks * 4
        unknown = set(counts) - set(RANKS)
        if unknown:
            raise InvalidState(f"unknown ranks in composition: {sorted(unknown)}")
        for rank in RANKS:
            n = int(counts.get(rank, 0))
            if n < 0 or n > per_rank:
                raise InvalidState(f"count for {rank} must be between 0 and {per_rank}, got {n}")
            self._counts[rank] = n

    def reshuffle(self) -> None:
        """Put every card back: each rank returns to four copies per deck."""
        self._counts = {rank: self.num_decks * 4 for rank in RANKS}

    @property
    def counts(self) -> Dict[str, int]:
        return dict(self._counts)

    def count(self, rank: str) -> int:
        return self._counts[rank]

    def copy(self) -> "Shoe":
        return Shoe(num_decks=self.num_decks, counts=self._counts)

    def capacity(self) -> int:
        return self.num_decks * CARDS_PER_DECK

    def remaining_total(self) -> int:
        return sum(self._counts.values())

    def decks_remaining(self) -> float:
        return self.remaining_total() / CARDS_PER_DECK

    def penetration(self) -> float:
        """Fraction of the shoe already dealt."""
        return (self.capacity() - self.remaining_total()) / self.capacity()

    def draw(self, rng: random.Random) -> Optional[str]:
        """
        Pick a rank with probability proportional to how many cards of that
        rank remain, i.e. a uniform pick over the physical cards left.  The
        shoe itself is not modified; see :meth:`consume`.  Returns ``None``
        when the shoe is empty.
        """
        total = self.remaining_total()
        if total == 0:
            return None
        threshold = rng.randrange(total)
        for rank in RANKS:
            n = self._counts[rank]
            if threshold < n:
                return rank
            threshold -= n
        return None

    def consume(self, rank: str) -> None:
        if self._counts[rank] <= 0:
            raise InvalidState(f"no {rank} left in the shoe")
        self._counts[rank] -= 1

    def restore(self, rank: str) -> None:
        """Return a previously consumed card to the shoe."""
        if self._counts[rank] >= self.num_decks * 4:
            raise InvalidState(f"the shoe already holds every {rank}")
        self._counts[rank] += 1


# ----- Hi-Lo count -----

def apply_draw(running_count: int, rank: str) -> int:
    return running_count + hi_lo_value(rank)


def true_count(running_count: int, shoe: Shoe) -> float:
    """Running count per deck remaining; 0 once the shoe is empty."""
    decks_remaining = shoe.decks_remaining()
    if decks_remaining == 0:
        return 0.0
    return running_count / decks_remaining


# ----- Hand resolution -----

@dataclass(frozen=True)
class SimState:
    """Shoe, running count and bankroll between two hands."""

    shoe: Shoe
    running_count: int
    bankroll: float


@dataclass(frozen=True)
class HandRecord:
    """The full trace of one resolved hand."""

    hand_number: int
    player_cards: Tuple[str, ...]
    dealer_cards: Tuple[str, ...]
    player_total: int
    dealer_total: int
    action: Action
    bet_amount: float
    result: str  # "win" | "loss" | "push"
    profit: float
    bankroll: float
    true_count: float


def _dealer_play(dealer: List[str], shoe: Shoe, running_count: int, rng: random.Random) -> int:
    """
    Dealer hits below 17 and on soft 17, stands on hard 17 and on 18 or
    more.  Stops early if the shoe runs dry or after ``DEALER_MAX_DRAWS``.
    """
    draws = 0
    while draws < DEALER_MAX_DRAWS:
        total, soft = evaluate(dealer)
        if total >= 18 or (total == 17 and not soft):
            break
        card = shoe.draw(rng)
        if card is None:
            break
        shoe.consume(card)
        running_count = apply_draw(running_count, card)
        dealer.append(card)
        draws += 1
    return running_count


def _settle(player: List[str], dealer: List[str], bet: float) -> Tuple[str, float]:
    """Return the outcome tag and the signed profit for the player."""
    player_bj = is_blackjack(player)
    dealer_bj = is_blackjack(dealer)
    if player_bj and dealer_bj:
        return "push", 0.0
    if player_bj:
        return "win", bet * BLACKJACK_PAYOUT
    if dealer_bj:
        return "loss", -bet
    player_value = evaluate(player).total
    dealer_value = evaluate(dealer).total
    if player_value > 21:
        return "loss", -bet
    if dealer_value > 21:
        return "win", bet
    if player_value > dealer_value:
        return "win", bet
    if player_value < dealer_value:
        return "loss", -bet
    return "push", 0.0


def resolve_hand(
    state: SimState,
    bet_config: BetConfig,
    strategy: str,
    betting: str,
    rng: random.Random,
    hand_number: int = 1,
) -> Tuple[HandRecord, SimState]:
    """
    Play one hand from ``state`` and return its record together with the
    state after the hand.  ``state`` is left untouched: the hand is dealt
    from a copy of its shoe.
    """
    shoe = state.shoe.copy()
    running_count = state.running_count
    if shoe.remaining_total() < 4:
        raise InsufficientCards(f"only {shoe.remaining_total()} cards left, need 4 to deal")

    def deal() -> str:
        nonlocal running_count
        card = shoe.draw(rng)
        if card is None:
            raise InsufficientCards("the shoe ran out while dealing")
        shoe.consume(card)
        running_count = apply_draw(running_count, card)
        return card

    player = [deal(), deal()]
    dealer = [deal(), deal()]
    dealer_up = point_value(dealer[0])

    tc = true_count(running_count, shoe)
    bet = bet_for_hand(tc, state.bankroll, bet_config, betting)

    hand = evaluate(player)
    action = recommended_action(hand.total, dealer_up, hand.is_soft, True, tc, strategy)

    if action in (Action.HIT, Action.DOUBLE):
        if action is Action.DOUBLE:
            bet = min(bet * 2, state.bankroll)
        card = shoe.draw(rng)
        if card is not None:
            shoe.consume(card)
            running_count = apply_draw(running_count, card)
            player.append(card)

    running_count = _dealer_play(dealer, shoe, running_count, rng)
    result, profit = _settle(player, dealer, bet)
    bankroll = state.bankroll + profit

    record = HandRecord(
        hand_number=hand_number,
        player_cards=tuple(player),
        dealer_cards=tuple(dealer),
        player_total=evaluate(player).total,
        dealer_total=evaluate(dealer).total,
        action=action,
        bet_amount=bet,
        result=result,
        profit=profit,
        bankroll=bankroll,
        true_count=tc,
    )
    return record, replace(state, shoe=shoe, running_count=running_count, bankroll=bankroll)
