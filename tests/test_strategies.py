import pytest

from strategies import Action, STRATEGIES, apply_deviations, basic_strategy, recommended_action

H, S, D = Action.HIT, Action.STAND, Action.DOUBLE


@pytest.mark.parametrize(
    "total,up,soft,can_double,expected",
    [
        (16, 10, False, True, H),
        (18, 6, True, True, D),
        (12, 5, False, False, S),
        # soft totals
        (19, 6, True, True, S),
        (18, 6, True, False, H),
        (18, 7, True, True, S),
        (18, 8, True, True, S),
        (18, 9, True, True, H),
        (18, 11, True, True, H),
        (17, 3, True, True, D),
        (17, 2, True, True, H),
        (16, 4, True, True, D),
        (15, 3, True, True, H),
        (14, 5, True, True, D),
        (13, 4, True, True, H),
        (13, 6, True, False, H),
        (12, 6, True, True, H),
        # hard totals
        (17, 11, False, True, S),
        (13, 6, False, True, S),
        (13, 7, False, True, H),
        (12, 3, False, True, H),
        (12, 4, False, True, S),
        (12, 7, False, True, H),
        (11, 11, False, True, D),
        (11, 6, False, False, H),
        (10, 9, False, True, D),
        (10, 10, False, True, H),
        (9, 3, False, True, D),
        (9, 2, False, True, H),
        (9, 7, False, True, H),
        (8, 6, False, True, H),
    ],
)
def test_basic_strategy_table(total, up, soft, can_double, expected):
    assert basic_strategy(total, up, soft, can_double) is expected


def test_no_split_action():
    assert {a.value for a in Action} == {"HIT", "STAND", "DOUBLE"}


def test_sixteen_against_ten_stands_at_high_count():
    assert basic_strategy(16, 10, False, True) is H
    assert recommended_action(16, 10, False, True, 3, "ai") is S
    assert recommended_action(16, 10, False, True, 3, "basic") is H


@pytest.mark.parametrize(
    "total,up,expected",
    [(16, 10, S), (15, 10, S), (12, 2, S), (12, 3, S), (10, 10, D), (9, 2, D)],
)
def test_positive_count_deviations(total, up, expected):
    basic = basic_strategy(total, up, False, True)
    assert apply_deviations(basic, total, up, 2, True) is expected


@pytest.mark.parametrize("total,up", [(12, 4), (12, 5), (12, 6), (13, 2)])
def test_negative_count_deviations(total, up):
    basic = basic_strategy(total, up, False, True)
    assert basic is S
    assert apply_deviations(basic, total, up, -2, True) is H


def test_deviations_need_an_extreme_count():
    assert apply_deviations(H, 16, 10, 1.9, True) is H
    assert apply_deviations(S, 12, 4, -1.9, True) is S


def test_other_hands_keep_basic_action():
    assert apply_deviations(H, 14, 10, 5, True) is H
    assert apply_deviations(S, 20, 10, -5, True) is S


def test_double_deviation_needs_two_cards():
    assert apply_deviations(H, 10, 10, 3, can_double=False) is H


def test_advanced_matches_ai():
    assert STRATEGIES["advanced"] == STRATEGIES["ai"]
    assert recommended_action(12, 3, False, True, 4, "advanced") is S


def test_unknown_strategy():
    with pytest.raises(ValueError):
        recommended_action(12, 3, False, True, 0, "martingale")
