"""
Price statistics over collected auction records.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from app.domain.closed_auctions import PriceStatistics


def compute_price_statistics(prices: Sequence[int]) -> PriceStatistics | None:
    """
    Average (rounded half up), max and min of `prices`; None when empty.
    """

    if not prices:
        return None

    mean = Decimal(sum(prices)) / Decimal(len(prices))
    average = int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return PriceStatistics(average=average, max=max(prices), min=min(prices))
