import pytest

from offerdesk.services.pricing import apply_discount, apply_markup, round_money


def test_percent_discount_subtracts_share_of_price():
    adj = apply_discount(2000, "PERCENT", 25)
    assert adj.after == 1500
    assert adj.discount == 500
    assert adj.delta == -500


def test_amount_discount_never_goes_below_zero():
    adj = apply_discount(300, "AMOUNT", 500)
    assert adj.after == 0
    assert adj.discount == 300


def test_free_zeroes_the_price():
    assert apply_discount(2000, "FREE", None).after == 0
    assert apply_markup(2000, "FREE", None).after == 0


def test_percent_markup_scales_price_up():
    adj = apply_markup(1000, "PERCENT", 10)
    assert adj.after == 1100
    assert adj.delta == 100


def test_amount_markup_is_additive():
    assert apply_markup(1000, "AMOUNT", 250).after == 1250


def test_unknown_adjustment_type_is_rejected():
    with pytest.raises(ValueError):
        apply_discount(1000, "MULTIPLY", 2)


@pytest.mark.parametrize(
    "value, expected",
    [(0.375, 0.38), (10.004, 10.0), (0.125, 0.13), (8500, 8500)],
)
def test_round_money_rounds_half_up(value, expected):
    assert round_money(value) == expected
