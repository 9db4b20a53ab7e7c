import pytest
from fastapi.testclient import TestClient

from app import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_strategies(client):
    body = client.get("/strategies").json()
    assert body["strategies"] == ["basic", "ai", "advanced"]
    assert body["betting"] == ["flat", "kelly", "progressive"]


def test_simulate_and_read_back(client):
    resp = client.post(
        "/simulate",
        json={"hands": 150, "num_decks": 2, "initial_bankroll": 100000, "seed": 4, "betting": "progressive"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["stop_reason"] == "completed"
    assert body["result"]["hands_played"] == 150
    assert len(body["hands"]) == 100
    assert body["hands"][-1]["hand_number"] == 150
    assert body["hands"][0]["action"] in ("HIT", "STAND", "DOUBLE")

    run_id = body["run_id"]
    run = client.get(f"/runs/{run_id}").json()
    assert run["id"] == run_id
    assert run["hands_played"] == 150
    assert run["hands_requested"] == 150
    assert run["strategy"] == "ai"
    assert run["betting"] == "progressive"
    assert run["final_bankroll"] == pytest.approx(body["result"]["final_bankroll"], abs=0.01)

    hands = client.get(f"/runs/{run_id}/hands").json()
    assert [h["hand_number"] for h in hands] == [h["hand_number"] for h in body["hands"]]
    assert hands[0]["player_cards"] == body["hands"][0]["player_cards"]

    runs = client.get("/runs").json()
    assert run_id in [r["id"] for r in runs]
    assert client.get("/runs", params={"after_id": run_id}).json() == []


def test_simulate_zero_hands(client):
    body = client.post("/simulate", json={"hands": 0}).json()
    assert body["result"]["hands_played"] == 0
    assert body["result"]["win_rate"] == 0
    assert body["hands"] == []


def test_simulate_validation(client):
    assert client.post("/simulate", json={"min_bet": 50, "max_bet": 10}).status_code == 422
    assert client.post("/simulate", json={"num_decks": 0}).status_code == 422
    assert client.post("/simulate", json={"strategy": "martingale"}).status_code == 422
    assert client.post("/simulate", json={"hands": 100_001}).status_code == 422


def test_unknown_run(client):
    assert client.get("/runs/999999").status_code == 404
    assert client.get("/runs/999999/hands").status_code == 404


def test_advice(client):
    resp = client.post(
        "/advice",
        json={"num_decks": 6, "player_cards": ["10", "6"], "dealer_card": "K", "running_count": 0, "bankroll": 1000},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["action"] == "HIT"
    assert body["basic_action"] == "HIT"
    assert body["recommended_bet"] == 5
    assert body["cards_remaining"] == 312


def test_advice_with_composition(client):
    counts = {r: 4 for r in ["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]}
    resp = client.post(
        "/advice",
        json={"num_decks": 2, "counts": counts, "player_cards": ["10", "6"], "dealer_card": "10", "running_count": 3},
    )
    body = resp.json()
    assert body["true_count"] == pytest.approx(3)
    assert body["action"] == "STAND"
    assert body["penetration"] == pytest.approx(0.5)


def test_advice_rejects_bad_input(client):
    assert client.post("/advice", json={"num_decks": 1, "counts": {"A": 9}}).status_code == 422
    assert client.post("/advice", json={"player_cards": ["1"]}).status_code == 422
