"""
Multi-hand Blackjack simulation.

:func:`run_simulation` plays up to ``hands`` hands one after another from
a single shoe, reshuffling once fewer than 25% of the cards remain, and
keeps a running bankroll.  The run ends early when the bankroll drops
below the minimum bet, when a hand cannot be played, or when the caller
asks it to stop.  Only the last ``HISTORY_SIZE`` hands are kept, but
every hand counts towards the aggregate result.
"""

from collections import deque
from dataclasses import dataclass
import logging
from typing import Callable, List, Optional
import random

from betting import BETTING, BetConfig
from game import GameError, HandRecord, Shoe, SimState, resolve_hand
from strategies import STRATEGIES

logger = logging.getLogger(__name__)

RESHUFFLE_THRESHOLD = 0.25
PROGRESS_EVERY = 50
HISTORY_SIZE = 100

ProgressFn = Callable[[float], None]
CancelFn = Callable[[], bool]


@dataclass(frozen=True)
class SimulationConfig:
    decks: int = 6
    initial_bankroll: float = 1000.0
    min_bet: float = 5.0
    max_bet: float = 100.0
    hands: int = 1000
    strategy: str = "ai"
    betting: str = "kelly"
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.decks < 1:
            raise ValueError("decks must be at least 1")
        if self.hands < 0:
            raise ValueError("hands cannot be negative")
        if self.strategy not in STRATEGIES:
            raise ValueError(f"unknown strategy {self.strategy!r}")
        if self.betting not in BETTING:
            raise ValueError(f"unknown betting policy {self.betting!r}")
        # validates the money values
        self.bet_config

    @property
    def bet_config(self) -> BetConfig:
        return BetConfig(self.min_bet, self.max_bet, self.initial_bankroll)


@dataclass(frozen=True)
class SimulationResult:
    hands_played: int
    hands_won: int
    hands_lost: int
    hands_pushed: int
    total_wagered: float
    total_won: float
    net_profit: float
    win_rate: float
    roi: float
    max_drawdown: float
    final_bankroll: float


@dataclass(frozen=True)
class SimulationReport:
    result: SimulationResult
    hands: List[HandRecord]
    stop_reason: str  # "completed" | "bankrupt" | "error" | "cancelled"
    error: Optional[str] = None


class _Tally:
    """Counters accumulated hand by hand during a run."""

    def __init__(self, bankroll: float) -> None:
        self.played = 0
        self.won = 0
        self.lost = 0
        self.pushed = 0
        self.wagered = 0.0
        self.returned = 0.0
        self.peak = bankroll
        self.max_drawdown = 0.0

    def add(self, record: HandRecord) -> None:
        self.played += 1
        if record.result == "win":
            self.won += 1
        elif record.result == "loss":
            self.lost += 1
        else:
            self.pushed += 1
        self.wagered += record.bet_amount
        if record.profit > 0:
            self.returned += record.profit + record.bet_amount
        self.peak = max(self.peak, record.bankroll)
        self.max_drawdown = max(self.max_drawdown, self.peak - record.bankroll)

    def result(self, initial_bankroll: float, bankroll: float) -> SimulationResult:
        net_profit = bankroll - initial_bankroll
        return SimulationResult(
            hands_played=self.played,
            hands_won=self.won,
            hands_lost=self.lost,
            hands_pushed=self.pushed,
            total_wagered=self.wagered,
            total_won=self.returned,
            net_profit=net_profit,
            win_rate=self.won / self.played if self.played > 0 else 0.0,
            roi=net_profit / initial_bankroll * 100,
            max_drawdown=self.max_drawdown,
            final_bankroll=bankroll,
        )


def needs_reshuffle(shoe: Shoe) -> bool:
    return shoe.remaining_total() < shoe.capacity() * RESHUFFLE_THRESHOLD


def run_simulation(
    config: SimulationConfig,
    rng: Optional[random.Random] = None,
    on_progress: Optional[ProgressFn] = None,
    should_cancel: Optional[CancelFn] = None,
) -> SimulationReport:
    """
    Run ``config.hands`` hands and return the aggregate result with the
    most recent hand records.

    ``on_progress`` receives the completed percentage every
    ``PROGRESS_EVERY`` hands and once more with 100 at the end.
    ``should_cancel`` is checked at the same points; returning true stops
    the run and the hands played so far are reported.
    """
    if rng is None:
        rng = random.Random(config.seed)
    bet_config = config.bet_config
    state = SimState(shoe=Shoe(config.decks), running_count=0, bankroll=config.initial_bankroll)
    tally = _Tally(config.initial_bankroll)
    history: deque = deque(maxlen=HISTORY_SIZE)
    stop_reason = "completed"
    error = None

    logger.info(
        "Starting simulation: %d hands, %d decks, strategy=%s, betting=%s",
        config.hands, config.decks, config.strategy, config.betting,
    )

    for i in range(config.hands):
        if needs_reshuffle(state.shoe):
            state = SimState(shoe=Shoe(config.decks), running_count=0, bankroll=state.bankroll)

        if state.bankroll < config.min_bet:
            logger.info("Bankrupt at hand %d with bankroll %.2f", i + 1, state.bankroll)
            stop_reason = "bankrupt"
            break

        try:
            record, state = resolve_hand(
                state, bet_config, config.strategy, config.betting, rng, hand_number=i + 1
            )
        except GameError as exc:
            logger.warning("Simulation stopped at hand %d: %s", i + 1, exc)
            stop_reason = "error"
            error = str(exc)
            break

        tally.add(record)
        history.append(record)

        if i % PROGRESS_EVERY == 0:
            if on_progress is not None:
                on_progress((i + 1) / config.hands * 100)
            if should_cancel is not None and should_cancel():
                logger.info("Simulation cancelled after %d hands", i + 1)
                stop_reason = "cancelled"
                break

    if on_progress is not None:
        on_progress(100.0)

    result = tally.result(config.initial_bankroll, state.bankroll)
    logger.info(
        "Simulation finished (%s): %d hands, net profit %.2f, max drawdown %.2f",
        stop_reason, result.hands_played, result.net_profit, result.max_drawdown,
    )
    return SimulationReport(result=result, hands=list(history), stop_reason=stop_reason, error=error)
