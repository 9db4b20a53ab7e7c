import pytest

from betting import (
    BetConfig,
    bet_for_hand,
    flat_bet,
    fractional_kelly,
    kelly_bankroll_bet,
    kelly_bet,
    progressive_bet,
)

CONFIG = BetConfig(min_bet=5, max_bet=100, initial_bankroll=1000)


def test_bet_config_validation():
    with pytest.raises(ValueError):
        BetConfig(min_bet=0, max_bet=10, initial_bankroll=100)
    with pytest.raises(ValueError):
        BetConfig(min_bet=20, max_bet=10, initial_bankroll=100)
    with pytest.raises(ValueError):
        BetConfig(min_bet=5, max_bet=10, initial_bankroll=-1)


def test_fractional_kelly():
    assert fractional_kelly(4) == pytest.approx(0.02 / 1.3 * 0.25)
    assert fractional_kelly(4) == pytest.approx(0.003846, abs=1e-6)
    assert fractional_kelly(0) == 0
    assert fractional_kelly(-3) == 0


def test_flat_bet():
    assert flat_bet(5, CONFIG) == 5


def test_kelly_bet_within_bounds():
    assert kelly_bet(4, CONFIG) == pytest.approx(5 + 95 * 0.02 / 1.3 * 0.25)
    assert kelly_bet(-1, CONFIG) == 5
    assert kelly_bet(10_000, CONFIG) == 100


def test_progressive_tiers():
    assert progressive_bet(3.5, CONFIG) == 15
    assert progressive_bet(2, CONFIG) == 10
    assert progressive_bet(1.2, CONFIG) == 7.5
    assert progressive_bet(0.9, CONFIG) == 5
    assert progressive_bet(-4, CONFIG) == 5


def test_bet_for_hand_clamps_to_bankroll_and_table():
    assert bet_for_hand(3, 1000, CONFIG, "progressive") == 15
    assert bet_for_hand(3, 7, CONFIG, "progressive") == 7
    assert bet_for_hand(3, 3, CONFIG, "progressive") == 5
    assert bet_for_hand(0, 1000, CONFIG, "flat") == 5


def test_bet_for_hand_unknown_policy():
    with pytest.raises(ValueError):
        bet_for_hand(0, 1000, CONFIG, "martingale")


def test_kelly_bankroll_bet():
    # raw bet is about 3.85, raised to the table minimum
    assert kelly_bankroll_bet(4, 1000) == 5
    assert kelly_bankroll_bet(0, 1000) == 5
    assert kelly_bankroll_bet(-2, 1000) == 5
    # 48.08 rounds to 50
    assert kelly_bankroll_bet(10, 5000) == 50
    # capped by the table maximum
    assert kelly_bankroll_bet(20, 10000) == 100
    # capped by 10% of the bankroll
    assert kelly_bankroll_bet(200, 300) == 30
