"""
FastAPI application exposing endpoints to simulate hands of Blackjack and
to advise a player counting cards at a real table.

Each card is represented solely by its rank (e.g. ``"9"`` or ``"K"``);
the shoe tracks four copies per rank per deck.  Bets are sized from the
Hi‑Lo true count, and the ``ai``/``advanced`` strategies deviate from
Basic Strategy at extreme counts.  Every simulation run is stored in the
database together with its most recent hands.

Usage:
    uvicorn app:app --reload

Endpoints:
    GET  /health               – simple health check
    GET  /strategies           – available strategy and betting policy names
    POST /simulate             – run a simulation, store it and return the result
    GET  /runs                 – stored simulation runs
    GET  /runs/{run_id}        – one stored run
    GET  /runs/{run_id}/hands  – the stored hands of a run
    POST /advice               – recommended action and bet for one hand
"""

import logging
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from advisor import advise
from betting import BETTING
from config import get_settings
from database import Base, engine, get_db
from game import InvalidState, Shoe
from models import SimulatedHand, SimulationRun
from schemas import AdviceRequest, AdviceResponse, HandRecord, RunOut, SimRequest, SimResponse
from simulation import SimulationConfig, SimulationReport, run_simulation
from strategies import STRATEGIES

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Blackjack Count Simulator API", version="1.0.0")
Base.metadata.create_all(bind=engine)


def _hand_out(hand) -> HandRecord:
    return HandRecord(
        hand_number=hand.hand_number,
        player_cards=list(hand.player_cards),
        dealer_cards=list(hand.dealer_cards),
        player_total=hand.player_total,
        dealer_total=hand.dealer_total,
        action=hand.action.value,
        bet_amount=hand.bet_amount,
        result=hand.result,
        profit=hand.profit,
        bankroll=hand.bankroll,
        true_count=round(hand.true_count, 3),
    )


def _save_run(db: Session, config: SimulationConfig, report: SimulationReport) -> SimulationRun:
    r = report.result
    run = SimulationRun(
        decks=config.decks,
        strategy=config.strategy,
        betting=config.betting,
        seed=config.seed,
        hands_requested=config.hands,
        initial_bankroll=config.initial_bankroll,
        min_bet=config.min_bet,
        max_bet=config.max_bet,
        hands_played=r.hands_played,
        hands_won=r.hands_won,
        hands_lost=r.hands_lost,
        hands_pushed=r.hands_pushed,
        total_wagered=r.total_wagered,
        total_won=r.total_won,
        net_profit=r.net_profit,
        win_rate=r.win_rate,
        roi=r.roi,
        max_drawdown=r.max_drawdown,
        final_bankroll=r.final_bankroll,
        stop_reason=report.stop_reason,
        error=report.error,
    )
    run.hands = [
        SimulatedHand(
            hand_number=h.hand_number,
            player_cards=",".join(h.player_cards),
            dealer_cards=",".join(h.dealer_cards),
            player_total=h.player_total,
            dealer_total=h.dealer_total,
            action=h.action.value,
            bet_amount=h.bet_amount,
            result=h.result,
            profit=h.profit,
            bankroll=h.bankroll,
            true_count=h.true_count,
        )
        for h in report.hands
    ]
    db.add(run)
    db.commit()
    db.refresh(run)
    return run


def _get_run(db: Session, run_id: int) -> SimulationRun:
    run = db.get(SimulationRun, run_id)
    if run is None:
        raise HTTPException(status_code=404, detail=f"run {run_id} not found")
    return run


@app.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/strategies")
def list_strategies() -> Dict[str, List[str]]:
    """Return the available playing strategies and betting policies."""
    return {"strategies": list(STRATEGIES.keys()), "betting": list(BETTING.keys())}


@app.post("/simulate", response_model=SimResponse)
def simulate(req: SimRequest, db: Session = Depends(get_db)) -> SimResponse:
    """
    Run a simulation of ``hands`` hands, store it and return the aggregate
    result with the last hands played.  A run that stops early (bankrupt
    bankroll or an unplayable hand) still returns what was played.
    """
    config = SimulationConfig(
        decks=req.num_decks,
        initial_bankroll=req.initial_bankroll,
        min_bet=req.min_bet,
        max_bet=req.max_bet,
        hands=req.hands,
        strategy=req.strategy,
        betting=req.betting,
        seed=req.seed,
    )
    report = run_simulation(config)
    run = _save_run(db, config, report)
    logger.info("Stored simulation run %d", run.id)
    return SimResponse(
        run_id=run.id,
        result=report.result.__dict__,
        hands=[_hand_out(h) for h in report.hands],
        stop_reason=report.stop_reason,
        error=report.error,
    )


@app.get("/runs", response_model=List[RunOut], summary="List stored simulation runs")
def list_runs(
    limit: int = Query(default=50, ge=1, le=1000),
    after_id: Optional[int] = Query(default=None, description="Pagination: id > after_id"),
    db: Session = Depends(get_db),
):
    stmt = select(SimulationRun)
    if after_id:
        stmt = stmt.where(SimulationRun.id > after_id)
    stmt = stmt.order_by(SimulationRun.id.asc()).limit(limit)
    return db.execute(stmt).scalars().all()


@app.get("/runs/{run_id}", response_model=RunOut)
def get_run(run_id: int, db: Session = Depends(get_db)):
    return _get_run(db, run_id)


@app.get("/runs/{run_id}/hands", response_model=List[HandRecord])
def get_run_hands(run_id: int, db: Session = Depends(get_db)) -> List[HandRecord]:
    run = _get_run(db, run_id)
    out = []
    for h in run.hands:
        out.append(
            HandRecord(
                hand_number=h.hand_number,
                player_cards=h.player_cards.split(","),
                dealer_cards=h.dealer_cards.split(","),
                player_total=h.player_total,
                dealer_total=h.dealer_total,
                action=h.action,
                bet_amount=float(h.bet_amount),
                result=h.result,
                profit=float(h.profit),
                bankroll=float(h.bankroll),
                true_count=round(h.true_count, 3),
            )
        )
    return out


@app.post("/advice", response_model=AdviceResponse)
def advice(req: AdviceRequest) -> AdviceResponse:
    """Recommend an action and a bet for the hand described in the request."""
    try:
        shoe = Shoe(num_decks=req.num_decks, counts=req.counts)
        result = advise(
            shoe,
            list(req.player_cards),
            req.dealer_card,
            req.running_count,
            req.bankroll,
            req.strategy,
        )
    except (InvalidState, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return AdviceResponse(
        action=result.action.value,
        basic_action=result.basic_action.value,
        win_probability=result.win_probability,
        recommended_bet=result.recommended_bet,
        true_count=result.true_count,
        cards_remaining=result.cards_remaining,
        decks_remaining=result.decks_remaining,
        penetration=result.penetration,
    )
