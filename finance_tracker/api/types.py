import datetime

import strawberry
from strawberry.types import Info

from finance_tracker.api.errors import store_errors
from finance_tracker.transactions.models import Category, PaymentType
from finance_tracker.transactions.schemas import CategoryStatistic, TransactionResponse
from finance_tracker.users.schemas import UserResponse

strawberry.enum(Category)
strawberry.enum(PaymentType)


@strawberry.type
class User:
    id: strawberry.ID
    username: str
    name: str
    email: str | None
    profile_picture: str | None

    @strawberry.field
    async def transactions(self, info: Info) -> list["Transaction"]:
        with store_errors("Error getting transactions", "user_transactions_get_failed"):
            rows = await info.context.transactions.list_for_owner(self.id)
        return [Transaction.from_response(row) for row in rows]

    @classmethod
    def from_response(cls, user: UserResponse) -> "User":
        return cls(
            id=strawberry.ID(user.id),
            username=user.username,
            name=user.name,
            email=user.email,
            profile_picture=user.profile_picture,
        )


@strawberry.type
class Transaction:
    id: strawberry.ID
    user_id: strawberry.ID
    description: str
    payment_type: PaymentType
    category: Category
    amount: float
    date: datetime.date

    @strawberry.field
    async def user(self, info: Info) -> User | None:
        with store_errors("Error getting user", "transaction_user_get_failed"):
            user = await info.context.users.get_by_id(self.user_id)
        return User.from_response(user) if user is not None else None

    @classmethod
    def from_response(cls, transaction: TransactionResponse) -> "Transaction":
        return cls(
            id=strawberry.ID(transaction.id),
            user_id=strawberry.ID(transaction.user_id),
            description=transaction.description,
            payment_type=transaction.payment_type,
            category=transaction.category,
            amount=transaction.amount,
            date=transaction.date,
        )


@strawberry.type
class CategoryStatistics:
    category: Category
    total_amount: float

    @classmethod
    def from_statistic(cls, statistic: CategoryStatistic) -> "CategoryStatistics":
        return cls(category=statistic.category, total_amount=statistic.total_amount)


@strawberry.type
class LogoutResponse:
    message: str


@strawberry.input
class CreateTransactionInput:
    description: str
    payment_type: PaymentType
    category: Category
    amount: float
    date: datetime.date


@strawberry.input
class UpdateTransactionInput:
    transaction_id: strawberry.ID
    description: str | None = None
    payment_type: PaymentType | None = None
    category: Category | None = None
    amount: float | None = None
    date: datetime.date | None = None


@strawberry.input
class SignUpInput:
    username: str
    name: str
    password: str
    email: str | None = None


@strawberry.input
class LoginInput:
    username: str
    password: str
