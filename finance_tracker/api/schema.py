import strawberry
import structlog
from strawberry.types import Info

from finance_tracker.advice.composer import FALLBACK_MESSAGE
from finance_tracker.api.context import RequestContext
from finance_tracker.api.errors import store_errors, user_errors
from finance_tracker.api.types import (
    CategoryStatistics,
    CreateTransactionInput,
    LoginInput,
    LogoutResponse,
    SignUpInput,
    Transaction,
    UpdateTransactionInput,
    User,
)
from finance_tracker.auth import (
    Authenticated,
    clear_session_cookie,
    require_user,
    set_session_cookie,
)
from finance_tracker.transactions.schemas import TransactionCreate, TransactionUpdate
from finance_tracker.users.schemas import LoginRequest, SignUpRequest

logger = structlog.get_logger()


@strawberry.type
class Query:
    @strawberry.field
    async def transactions(self, info: Info[RequestContext, None]) -> list[Transaction]:
        user_id = require_user(info.context.auth)
        with store_errors("Error getting transactions", "transactions_get_failed"):
            rows = await info.context.transactions.list_for_owner(user_id)
        return [Transaction.from_response(row) for row in rows]

    @strawberry.field
    async def transaction(
        self, info: Info[RequestContext, None], transaction_id: strawberry.ID
    ) -> Transaction | None:
        owner_id = info.context.owner_filter()
        with store_errors("Error getting transaction", "transaction_get_failed"):
            row = await info.context.transactions.get_by_id(transaction_id, owner_id)
        return Transaction.from_response(row) if row is not None else None

    @strawberry.field
    async def category_statistics(
        self, info: Info[RequestContext, None]
    ) -> list[CategoryStatistics]:
        user_id = require_user(info.context.auth)
        with store_errors("Error getting category statistics", "category_statistics_failed"):
            statistics = await info.context.transactions.category_statistics(user_id)
        return [CategoryStatistics.from_statistic(statistic) for statistic in statistics]

    @strawberry.field
    async def auth_user(self, info: Info[RequestContext, None]) -> User | None:
        match info.context.auth:
            case Authenticated(user_id=user_id):
                try:
                    user = await info.context.users.get_by_id(user_id)
                except Exception as exc:
                    logger.error("auth_user_get_failed", user_id=user_id, error=str(exc))
                    return None
                return User.from_response(user) if user is not None else None
            case _:
                return None

    @strawberry.field
    async def user(self, info: Info[RequestContext, None], user_id: strawberry.ID) -> User | None:
        with store_errors("Error getting user", "user_get_failed"):
            user = await info.context.users.get_by_id(user_id)
        return User.from_response(user) if user is not None else None


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_transaction(
        self, info: Info[RequestContext, None], input: CreateTransactionInput
    ) -> Transaction:
        user_id = require_user(info.context.auth)
        with store_errors("Error creating transaction", "transaction_create_failed"):
            data = TransactionCreate(
                description=input.description,
                payment_type=input.payment_type,
                category=input.category,
                amount=input.amount,
                date=input.date,
            )
            row = await info.context.transactions.create(user_id, data)
        return Transaction.from_response(row)

    @strawberry.mutation
    async def update_transaction(
        self, info: Info[RequestContext, None], input: UpdateTransactionInput
    ) -> Transaction | None:
        owner_id = info.context.owner_filter()
        with store_errors("Error updating transaction", "transaction_update_failed"):
            data = TransactionUpdate(
                description=input.description,
                payment_type=input.payment_type,
                category=input.category,
                amount=input.amount,
                date=input.date,
            )
            row = await info.context.transactions.update(input.transaction_id, data, owner_id)
        return Transaction.from_response(row) if row is not None else None

    @strawberry.mutation
    async def delete_transaction(
        self, info: Info[RequestContext, None], transaction_id: strawberry.ID
    ) -> Transaction | None:
        owner_id = info.context.owner_filter()
        with store_errors("Error deleting transaction", "transaction_delete_failed"):
            row = await info.context.transactions.delete(transaction_id, owner_id)
        return Transaction.from_response(row) if row is not None else None

    @strawberry.mutation(name="getAIResponse")
    async def get_ai_response(self, info: Info[RequestContext, None]) -> str:
        user_id = require_user(info.context.auth)
        try:
            history = await info.context.transactions.history_for_owner(user_id)
        except Exception as exc:
            logger.error("advice_history_load_failed", user_id=user_id, error=str(exc))
            return FALLBACK_MESSAGE
        return await info.context.advice.compose(history)

    @strawberry.mutation
    async def sign_up(self, info: Info[RequestContext, None], input: SignUpInput) -> User:
        with user_errors("sign_up_failed"):
            data = SignUpRequest(
                username=input.username,
                name=input.name,
                email=input.email,
                password=input.password,
            )
            user = await info.context.users.sign_up(data)
        set_session_cookie(info.context.response, user.id, info.context.settings)
        return User.from_response(user)

    @strawberry.mutation
    async def login(self, info: Info[RequestContext, None], input: LoginInput) -> User:
        with user_errors("login_failed"):
            data = LoginRequest(username=input.username, password=input.password)
            user = await info.context.users.authenticate(data)
        set_session_cookie(info.context.response, user.id, info.context.settings)
        return User.from_response(user)

    @strawberry.mutation
    async def logout(self, info: Info[RequestContext, None]) -> LogoutResponse:
        clear_session_cookie(info.context.response, info.context.settings)
        return LogoutResponse(message="Logged out successfully")


schema = strawberry.Schema(query=Query, mutation=Mutation)
