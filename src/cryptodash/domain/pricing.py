"""Price normalization and monthly bucketing of timestamped samples."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from cryptodash.domain.models import PricePoint

logger = logging.getLogger(__name__)


def round_usd(value: float | str | Decimal) -> int:
    """Round a USD amount half-up to a whole dollar."""
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Not a price: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a price: {value!r}")
    return int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def month_key(timestamp_ms: float) -> str:
    """YYYY-MM of a Unix millisecond timestamp, in UTC."""
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)
    return f"{dt.year:04d}-{dt.month:02d}"


def monthly_averages(samples: Iterable[Sequence[float]]) -> list[PricePoint]:
    """Average ``[timestamp_ms, price]`` samples per calendar month.

    Returns one point per month present in the input, sorted ascending by
    month. Rows that are not a numeric pair, or carry a negative price, are
    skipped.
    """
    sums: dict[str, Decimal] = defaultdict(Decimal)
    counts: dict[str, int] = defaultdict(int)

    for row in samples:
        try:
            timestamp, price = row[0], row[1]
            key = month_key(float(timestamp))
            amount = Decimal(str(price))
        except (TypeError, ValueError, IndexError, InvalidOperation, OverflowError):
            logger.debug("Skipping malformed price sample: %r", row)
            continue
        if not amount.is_finite() or amount < 0:
            logger.debug("Skipping out-of-range price sample: %r", row)
            continue
        sums[key] += amount
        counts[key] += 1

    return [
        PricePoint(month=key, price=round_usd(sums[key] / counts[key]))
        for key in sorted(sums)
    ]
