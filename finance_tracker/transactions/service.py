from uuid import uuid4

import structlog

from finance_tracker.exceptions import UnauthorizedError, ValidationError
from finance_tracker.transactions.repository import TransactionRepository
from finance_tracker.transactions.schemas import (
    CategoryStatistic,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)
from finance_tracker.transactions.statistics import aggregate_by_category

logger = structlog.get_logger()


class TransactionService:
    def __init__(self, repo: TransactionRepository) -> None:
        self._repo = repo

    async def create(self, user_id: str, data: TransactionCreate) -> TransactionResponse:
        transaction_id = str(uuid4())
        row = await self._repo.insert(transaction_id, user_id, data.model_dump(mode="json"))

        logger.info("transaction_created", transaction_id=transaction_id, user_id=user_id)
        return self._to_response(row)

    async def list_for_owner(self, user_id: str) -> list[TransactionResponse]:
        rows = await self._repo.list_by_owner(user_id)
        return [self._to_response(row) for row in rows]

    async def history_for_owner(self, user_id: str) -> list[TransactionResponse]:
        """All of the owner's transactions, most recent date first."""
        rows = await self._repo.list_by_owner(user_id, newest_first=True)
        return [self._to_response(row) for row in rows]

    async def get_by_id(
        self, transaction_id: str, owner_id: str | None = None
    ) -> TransactionResponse | None:
        row = await self._repo.get_by_id(transaction_id)
        if row is None:
            return None
        self._check_owner(row, owner_id)
        return self._to_response(row)

    async def update(
        self,
        transaction_id: str,
        data: TransactionUpdate,
        owner_id: str | None = None,
    ) -> TransactionResponse | None:
        update_data = data.model_dump(mode="json", exclude_none=True)
        if not update_data:
            raise ValidationError("No fields to update")

        if owner_id is not None:
            existing = await self._repo.get_by_id(transaction_id)
            if existing is None:
                return None
            self._check_owner(existing, owner_id)

        row = await self._repo.update_by_id(transaction_id, update_data)
        if row is None:
            return None

        logger.info("transaction_updated", transaction_id=transaction_id)
        return self._to_response(row)

    async def delete(
        self, transaction_id: str, owner_id: str | None = None
    ) -> TransactionResponse | None:
        if owner_id is not None:
            existing = await self._repo.get_by_id(transaction_id)
            if existing is None:
                return None
            self._check_owner(existing, owner_id)

        row = await self._repo.delete_by_id(transaction_id)
        if row is None:
            return None

        logger.info("transaction_deleted", transaction_id=transaction_id)
        return self._to_response(row)

    async def category_statistics(self, user_id: str) -> list[CategoryStatistic]:
        return aggregate_by_category(await self.list_for_owner(user_id))

    @staticmethod
    def _check_owner(row: dict, owner_id: str | None) -> None:
        if owner_id is not None and row["user_id"] != owner_id:
            raise UnauthorizedError()

    def _to_response(self, row: dict) -> TransactionResponse:
        return TransactionResponse(
            id=row["id"],
            user_id=row["user_id"],
            description=row["description"],
            payment_type=row["payment_type"],
            category=row["category"],
            amount=row["amount"],
            date=row["date"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
