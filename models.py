from sqlalchemy import Column, Integer, String, Numeric, Float, ForeignKey, DateTime, func, Index
from sqlalchemy.orm import relationship

from database import Base


class SimulationRun(Base):
    __tablename__ = "simulation_runs"
    id = Column(Integer, primary_key=True, autoincrement=True)
    decks = Column(Integer, nullable=False)
    strategy = Column(String, nullable=False, default="ai")
    betting = Column(String, nullable=False, default="kelly")
    seed = Column(Integer, nullable=True)
    hands_requested = Column(Integer, nullable=False)
    initial_bankroll = Column(Numeric(12, 2), nullable=False)
    min_bet = Column(Numeric(12, 2), nullable=False)
    max_bet = Column(Numeric(12, 2), nullable=False)

    hands_played = Column(Integer, nullable=False, default=0)
    hands_won = Column(Integer, nullable=False, default=0)
    hands_lost = Column(Integer, nullable=False, default=0)
    hands_pushed = Column(Integer, nullable=False, default=0)
    total_wagered = Column(Numeric(14, 2), nullable=False, default=0)
    total_won = Column(Numeric(14, 2), nullable=False, default=0)
    net_profit = Column(Numeric(14, 2), nullable=False, default=0)
    win_rate = Column(Float, nullable=False, default=0.0)
    roi = Column(Float, nullable=False, default=0.0)
    max_drawdown = Column(Numeric(14, 2), nullable=False, default=0)
    final_bankroll = Column(Numeric(14, 2), nullable=False, default=0)
    stop_reason = Column(String, nullable=False, default="completed")
    error = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    hands = relationship(
        "SimulatedHand", back_populates="run", cascade="all, delete-orphan", order_by="SimulatedHand.hand_number"
    )


class SimulatedHand(Base):
    __tablename__ = "simulated_hands"
    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(Integer, ForeignKey("simulation_runs.id", ondelete="CASCADE"), index=True, nullable=False)
    hand_number = Column(Integer, nullable=False)
    player_cards = Column(String, nullable=False)  # comma separated ranks
    dealer_cards = Column(String, nullable=False)
    player_total = Column(Integer, nullable=False)
    dealer_total = Column(Integer, nullable=False)
    action = Column(String, nullable=False)
    bet_amount = Column(Numeric(12, 2), nullable=False, default=0)
    result = Column(String, nullable=False)
    profit = Column(Numeric(12, 2), nullable=False, default=0)
    bankroll = Column(Numeric(14, 2), nullable=False, default=0)
    true_count = Column(Float, nullable=False, default=0.0)

    run = relationship("SimulationRun", back_populates="hands")


# reading the hands of a run in order
Index("ix_simulated_hands_run_number", SimulatedHand.run_id, SimulatedHand.hand_number)
