"""Stock ledger reconciliation.

Pure functions (no I/O, no Django) that turn an order's previous and new
line items into per-product stock deltas and decide whether live stock can
absorb them.

A *delta* is the signed change in stock *required* by the order:
``after - before``.  Positive values consume stock, negative values give it
back.  Products that appear on either side always get an entry, including
net-zero ones, so callers can tell "untouched" from "changed back".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Tuple


@dataclass(frozen=True)
class StockShortage:
    """A product whose live stock cannot cover its positive delta."""

    product_id: int
    requested: int
    available: int


@dataclass(frozen=True)
class Feasibility:
    """Outcome of checking a delta against live stock.

    Every failing product is reported, sorted by product id.
    """

    missing_products: List[int] = field(default_factory=list)
    shortages: List[StockShortage] = field(default_factory=list)

    @property
    def is_feasible(self) -> bool:
        return not self.missing_products and not self.shortages


def quantities_from_lines(lines: Iterable[Tuple[int, int]]) -> Dict[int, int]:
    """Collapse ``(product_id, quantity)`` pairs into a quantity mapping.

    Raises ``ValueError`` for a duplicate product or a non-positive
    quantity; an order holds at most one line per product.
    """
    quantities: Dict[int, int] = {}
    for product_id, quantity in lines:
        if quantity <= 0:
            raise ValueError(
                f"Quantity for product {product_id} must be at least 1, got {quantity}."
            )
        if product_id in quantities:
            raise ValueError(f"Product {product_id} appears more than once.")
        quantities[product_id] = quantity
    return quantities


def compute_stock_delta(
    before: Mapping[int, int], after: Mapping[int, int]
) -> Dict[int, int]:
    """Return ``after[p] - before[p]`` for every product on either side."""
    for product_id, quantity in after.items():
        if quantity <= 0:
            raise ValueError(
                f"Quantity for product {product_id} must be at least 1, got {quantity}."
            )
    product_ids = sorted(set(before) | set(after))
    return {p: after.get(p, 0) - before.get(p, 0) for p in product_ids}


def stock_credit(before: Mapping[int, int]) -> Dict[int, int]:
    """Delta that returns every line of a removed order to stock."""
    return compute_stock_delta(before, {})


def check_feasibility(
    delta: Mapping[int, int], available: Mapping[int, int]
) -> Feasibility:
    """Check *delta* against *available* stock.

    *available* must hold the live stock of every product known to the
    catalog among those in *delta*; anything absent is reported as missing.
    Only positive deltas need stock.
    """
    missing: List[int] = []
    shortages: List[StockShortage] = []
    for product_id in sorted(delta):
        if product_id not in available:
            missing.append(product_id)
            continue
        requested = delta[product_id]
        if requested > 0 and available[product_id] < requested:
            shortages.append(
                StockShortage(
                    product_id=product_id,
                    requested=requested,
                    available=available[product_id],
                )
            )
    return Feasibility(missing_products=missing, shortages=shortages)
