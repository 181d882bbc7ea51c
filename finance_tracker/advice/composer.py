"""Turns a user's transaction history into financial advice text."""

import json
from collections.abc import Sequence

import structlog

from finance_tracker.advice.generator import TextGenerator
from finance_tracker.advice.prompts import ADVICE_PROMPT
from finance_tracker.transactions.models import Category
from finance_tracker.transactions.schemas import TransactionResponse

logger = structlog.get_logger()

NO_TRANSACTIONS_MESSAGE = (
    "No transactions found. Start by adding some transactions to get financial advice."
)
FALLBACK_MESSAGE = "Unable to generate financial advice at this time. Please try again later."


def summarize_transactions(transactions: Sequence[TransactionResponse]) -> list[dict]:
    return [
        {
            "description": transaction.description,
            "amount": transaction.amount,
            "category": transaction.category.value,
            "paymentType": transaction.payment_type.value,
            "date": transaction.date.isoformat(),
        }
        for transaction in transactions
    ]


def total_for_category(transactions: Sequence[TransactionResponse], category: Category) -> float:
    return sum(
        (transaction.amount for transaction in transactions if transaction.category == category),
        0.0,
    )


def build_advice_prompt(transactions: Sequence[TransactionResponse]) -> str:
    return ADVICE_PROMPT.format(
        transaction_history=json.dumps(summarize_transactions(transactions), indent=2),
        total_expenses=total_for_category(transactions, Category.expense),
        total_savings=total_for_category(transactions, Category.saving),
    )


class AdviceComposer:
    """Builds the advice prompt and relays it to a ``TextGenerator``.

    Generation failures never propagate: they are logged and replaced by
    ``FALLBACK_MESSAGE``. The generated text is returned unmodified.
    """

    def __init__(self, generator: TextGenerator) -> None:
        self._generator = generator

    async def compose(self, transactions: Sequence[TransactionResponse]) -> str:
        """Expects ``transactions`` sorted by date, most recent first."""
        if not transactions:
            return NO_TRANSACTIONS_MESSAGE

        try:
            prompt = build_advice_prompt(transactions)
            advice = await self._generator.generate(prompt)
        except Exception as exc:
            logger.error("advice_generation_failed", error=str(exc))
            return FALLBACK_MESSAGE

        logger.info("advice_generated", transaction_count=len(transactions))
        return advice
