from product_page.application.utils.quantity import adjust_quantity, is_within_stock


def test_adjust_quantity_applies_in_range_delta():
    assert adjust_quantity(1, 1, 15) == 2
    assert adjust_quantity(5, -4, 15) == 1
    assert adjust_quantity(14, 1, 15) == 15


def test_adjust_quantity_keeps_current_when_out_of_range():
    assert adjust_quantity(1, -1, 15) == 1
    assert adjust_quantity(15, 1, 15) == 15
    assert adjust_quantity(3, 100, 15) == 3


def test_single_unit_stock():
    assert adjust_quantity(1, 1, 1) == 1
    assert adjust_quantity(1, -1, 1) == 1
    assert is_within_stock(1, 1)
    assert not is_within_stock(0, 1)
    assert not is_within_stock(2, 1)
