"""Per-category totals over a user's transactions."""

from collections import defaultdict
from collections.abc import Iterable

from finance_tracker.transactions.schemas import CategoryStatistic, TransactionResponse


def aggregate_by_category(transactions: Iterable[TransactionResponse]) -> list[CategoryStatistic]:
    """Sum ``amount`` per category present in ``transactions``.

    Categories with no transactions are left out rather than reported as zero.
    Amounts are summed as given, without validation.
    """
    totals: defaultdict[str, float] = defaultdict(float)
    for transaction in transactions:
        totals[transaction.category] += transaction.amount

    return [
        CategoryStatistic(category=category, total_amount=total_amount)
        for category, total_amount in totals.items()
    ]
