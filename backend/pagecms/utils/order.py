from typing import Dict, Iterable, List


def compact_order(items: Iterable, order_field: str = "display_order") -> List[Dict]:
    """
    Plans dense order values (0..N-1) following the given sequence.

    Returns {id, <order_field>} pairs; persisting them is left to the
    store's bulk reorder so the rewrite stays atomic.
    """
    return [
        {"id": item.id, order_field: index}
        for index, item in enumerate(items)
    ]


def next_display_order(items: Iterable, order_field: str = "display_order") -> int:
    """First order value after the current maximum; 0 for an empty scope."""
    orders = [getattr(item, order_field) or 0 for item in items]
    return (max(orders) + 1) if orders else 0
