from __future__ import annotations


def is_within_stock(quantity: int, stock: int) -> bool:
    return 1 <= quantity <= stock


def adjust_quantity(current: int, delta: int, stock: int) -> int:
    """
    Apply delta to current quantity.
    Out-of-range results are dropped silently and the current quantity is kept.
    """
    candidate = current + delta
    if is_within_stock(candidate, stock):
        return candidate
    return current
