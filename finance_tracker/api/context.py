import structlog
from fastapi import Request
from strawberry.fastapi import BaseContext

from finance_tracker.advice.composer import AdviceComposer
from finance_tracker.auth import (
    Anonymous,
    AuthContext,
    Authenticated,
    read_session_token,
    require_user,
)
from finance_tracker.config import Settings
from finance_tracker.dependencies import (
    AdviceComposerDep,
    SettingsDep,
    TransactionServiceDep,
    UserServiceDep,
)
from finance_tracker.transactions.service import TransactionService
from finance_tracker.users.service import UserService

logger = structlog.get_logger()


class RequestContext(BaseContext):
    def __init__(
        self,
        settings: Settings,
        auth: AuthContext,
        transactions: TransactionService,
        users: UserService,
        advice: AdviceComposer,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.auth = auth
        self.transactions = transactions
        self.users = users
        self.advice = advice

    def owner_filter(self) -> str | None:
        """Caller id to check by-id operations against, when ownership is enforced."""
        if not self.settings.enforce_transaction_ownership:
            return None
        return require_user(self.auth)


async def get_context(
    request: Request,
    settings: SettingsDep,
    transactions: TransactionServiceDep,
    users: UserServiceDep,
    advice: AdviceComposerDep,
) -> RequestContext:
    auth: AuthContext = Anonymous()
    user_id = read_session_token(request.cookies.get(settings.session_cookie_name), settings)
    if user_id is not None:
        if await users.get_by_id(user_id) is not None:
            auth = Authenticated(user_id=user_id)
        else:
            logger.info("session_user_missing", user_id=user_id)

    return RequestContext(
        settings=settings,
        auth=auth,
        transactions=transactions,
        users=users,
        advice=advice,
    )
