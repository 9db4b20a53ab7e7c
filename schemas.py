"""
Pydantic data models for API requests and responses.

These classes mirror the dataclasses returned by the simulation and
advice functions and ensure that requests are validated and responses
are properly serialised by FastAPI.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

Rank = Literal["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]
StrategyName = Literal["basic", "ai", "advanced"]
BettingName = Literal["flat", "kelly", "progressive"]


class SimRequest(BaseModel):
    """Parameters for the simulation endpoint."""

    hands: int = Field(1000, ge=0, le=100_000, description="Number of hands to simulate.")
    num_decks: int = Field(6, ge=1, le=8, description="Number of decks in the shoe.")
    initial_bankroll: float = Field(1000.0, gt=0, description="Bankroll at the start of the run.")
    min_bet: float = Field(5.0, gt=0, description="Minimum bet per hand.")
    max_bet: float = Field(100.0, gt=0, description="Maximum bet per hand.")
    strategy: StrategyName = Field("ai", description='Playing strategy: "basic", "ai" or "advanced".')
    betting: BettingName = Field("kelly", description='Bet sizing: "flat", "kelly" or "progressive".')
    seed: Optional[int] = Field(
        None,
        description="Random seed for reproducible simulations. Leave blank for non‑deterministic behaviour.",
    )

    @model_validator(mode="after")
    def check_bet_bounds(self) -> "SimRequest":
        if self.max_bet < self.min_bet:
            raise ValueError("max_bet must be greater than or equal to min_bet")
        return self


class HandRecord(BaseModel):
    """A single simulated hand."""

    model_config = ConfigDict(from_attributes=True)

    hand_number: int
    player_cards: List[str] = Field(..., description="The ranks of the player's cards in this hand.")
    dealer_cards: List[str] = Field(..., description="The ranks of the dealer's cards at the end of the hand.")
    player_total: int
    dealer_total: int
    action: str = Field(..., description="The action taken by the player: HIT, STAND or DOUBLE.")
    bet_amount: float = Field(..., description="The total bet placed on this hand (includes doubling).")
    result: str = Field(..., description="Outcome of the hand: win, loss, or push.")
    profit: float = Field(..., description="Signed profit of the hand for the player.")
    bankroll: float = Field(..., description="Bankroll after this hand was settled.")
    true_count: float = Field(..., description="Hi‑Lo true count when the decision was made.")


class SimulationResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    hands_played: int
    hands_won: int
    hands_lost: int
    hands_pushed: int
    total_wagered: float
    total_won: float = Field(..., description="Stake plus profit returned on winning hands.")
    net_profit: float
    win_rate: float
    roi: float = Field(..., description="Net profit as a percentage of the initial bankroll.")
    max_drawdown: float
    final_bankroll: float


class SimResponse(BaseModel):
    run_id: int
    result: SimulationResult
    hands: List[HandRecord] = Field(..., description="The most recent hands of the run (at most 100).")
    stop_reason: str = Field(..., description="completed, bankrupt, error or cancelled.")
    error: Optional[str] = None


class RunOut(SimulationResult):
    id: int
    decks: int
    strategy: str
    betting: str
    seed: Optional[int] = None
    hands_requested: int
    initial_bankroll: float
    min_bet: float
    max_bet: float
    stop_reason: str
    error: Optional[str] = None
    created_at: Optional[datetime] = None


class AdviceRequest(BaseModel):
    num_decks: int = Field(6, ge=1, le=8, description="Number of decks in the shoe.")
    counts: Optional[Dict[Rank, int]] = Field(
        None, description="Cards left per rank. Leave blank for a full shoe; missing ranks count as 0."
    )
    player_cards: List[Rank] = Field(default_factory=list)
    dealer_card: Optional[Rank] = None
    running_count: int = 0
    bankroll: float = Field(1000.0, gt=0)
    strategy: StrategyName = "ai"


class AdviceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    action: str
    basic_action: str
    win_probability: float
    recommended_bet: float
    true_count: float
    cards_remaining: int
    decks_remaining: float
    penetration: float
