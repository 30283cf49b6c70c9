# expense_tracker/services/aggregation.py
"""
Monthly totals in one base currency.

Every expense is converted at the rate of its own occurred_at date. Conversions
are independent, so they run concurrently; results are merged in input order.

Skip policy: an expense whose rate cannot be resolved (FxLookupError) is left
out of the totals and listed in ``unavailable``. The total is then an
under-count; ``MonthlyAggregate.complete`` tells the caller so.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from expense_tracker.currency import normalize_currency
from expense_tracker.errors import FxLookupError
from expense_tracker.services.fx import FxConverter

logger = logging.getLogger("et.aggregate")

UNKNOWN_CATEGORY = "Unknown category"


class ExpenseLike(Protocol):
    id: str
    amount: float
    currency: str
    category_id: str
    occurred_at: str


class CategoryLike(Protocol):
    id: str
    name: str


class AggregationCancelled(Exception):
    """The inputs changed while this aggregation was in flight; drop its result."""


@dataclass
class CancellationToken:
    generation: int = 0
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class MonthlyAggregate:
    total: float = 0.0
    by_category: Dict[str, float] = field(default_factory=dict)
    unavailable: List[str] = field(default_factory=list)  # expense ids skipped

    @property
    def complete(self) -> bool:
        return not self.unavailable


@dataclass(frozen=True)
class CategoryTotal:
    category_id: str
    name: str
    total: float


async def _convert_each(
    expenses: Sequence[ExpenseLike], base: str, converter: FxConverter
) -> list:
    return await asyncio.gather(
        *(converter.convert(e.occurred_at, e.amount, e.currency, base) for e in expenses),
        return_exceptions=True,
    )


async def aggregate(
    expenses: Iterable[ExpenseLike],
    base_currency: str,
    converter: FxConverter,
    token: Optional[CancellationToken] = None,
) -> MonthlyAggregate:
    items = list(expenses)
    base = normalize_currency(base_currency)
    results = await _convert_each(items, base, converter)

    if token is not None and token.cancelled:
        raise AggregationCancelled()

    agg = MonthlyAggregate()
    for expense, result in zip(items, results):
        if isinstance(result, FxLookupError):
            logger.info(
                "Skipping expense %s in totals: %s", expense.id, result.message
            )
            agg.unavailable.append(expense.id)
            continue
        if isinstance(result, BaseException):
            raise result
        agg.total += result
        agg.by_category[expense.category_id] = (
            agg.by_category.get(expense.category_id, 0.0) + result
        )
    return agg


async def convert_line_items(
    expenses: Iterable[ExpenseLike], base_currency: str, converter: FxConverter
) -> Dict[str, Optional[float]]:
    """Per-expense amount in the base currency; None where the rate is unavailable."""
    items = list(expenses)
    results = await _convert_each(items, normalize_currency(base_currency), converter)
    converted: Dict[str, Optional[float]] = {}
    for expense, result in zip(items, results):
        if isinstance(result, FxLookupError):
            converted[expense.id] = None
        elif isinstance(result, BaseException):
            raise result
        else:
            converted[expense.id] = result
    return converted


def category_totals(
    agg: MonthlyAggregate, categories: Iterable[CategoryLike]
) -> List[CategoryTotal]:
    """Named rows, biggest first. Deleted categories show as 'Unknown category'."""
    names = {c.id: c.name for c in categories}
    rows = [
        CategoryTotal(category_id=cid, name=names.get(cid, UNKNOWN_CATEGORY), total=total)
        for cid, total in agg.by_category.items()
    ]
    rows.sort(key=lambda r: r.total, reverse=True)  # stable: ties keep insertion order
    return rows
