import aiosqlite
from fastapi.testclient import TestClient

from finance_tracker.advice.composer import FALLBACK_MESSAGE, NO_TRANSACTIONS_MESSAGE
from finance_tracker.dependencies import get_transaction_service, get_user_service
from finance_tracker.main import create_app
from finance_tracker.users.schemas import UserResponse

SIGN_UP = """
mutation SignUp($input: SignUpInput!) {
  signUp(input: $input) { id username name email profilePicture }
}
"""

LOGIN = """
mutation Login($input: LoginInput!) {
  login(input: $input) { id username }
}
"""

LOGOUT = "mutation { logout { message } }"

AUTH_USER = "query { authUser { id username } }"

CREATE = """
mutation Create($input: CreateTransactionInput!) {
  createTransaction(input: $input) {
    id userId description paymentType category amount date
  }
}
"""

TRANSACTIONS = "query { transactions { id description category amount user { username } } }"

TRANSACTION = """
query Transaction($id: ID!) {
  transaction(transactionId: $id) { id description amount }
}
"""

UPDATE = """
mutation Update($input: UpdateTransactionInput!) {
  updateTransaction(input: $input) { id description amount category }
}
"""

DELETE = """
mutation Delete($id: ID!) {
  deleteTransaction(transactionId: $id) { id }
}
"""

STATISTICS = "query { categoryStatistics { category totalAmount } }"

ADVICE = "mutation { getAIResponse }"


def gql(client, query, variables=None):
    response = client.post("/graphql", json={"query": query, "variables": variables or {}})
    return response.json()


def sign_up(client, username="alice", password="s3cret-pass"):
    body = gql(
        client,
        SIGN_UP,
        {"input": {"username": username, "name": username.title(), "password": password}},
    )
    assert "errors" not in body, body
    return body["data"]["signUp"]


def create(client, description, amount, category, payment_type="card", date="2024-05-01"):
    body = gql(
        client,
        CREATE,
        {
            "input": {
                "description": description,
                "amount": amount,
                "category": category,
                "paymentType": payment_type,
                "date": date,
            }
        },
    )
    assert "errors" not in body, body
    return body["data"]["createTransaction"]


def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_anonymous_transactions_query_is_unauthorized(client):
    body = gql(client, TRANSACTIONS)

    assert body["data"] is None
    assert body["errors"][0]["message"] == "Unauthorized"


def test_anonymous_statistics_and_advice_are_unauthorized(client):
    assert gql(client, STATISTICS)["errors"][0]["message"] == "Unauthorized"
    assert gql(client, ADVICE)["errors"][0]["message"] == "Unauthorized"


def test_anonymous_auth_user_is_null(client):
    assert gql(client, AUTH_USER) == {"data": {"authUser": None}}


def test_sign_up_sets_session(client, settings):
    user = sign_up(client)

    assert user["username"] == "alice"
    assert user["profilePicture"].endswith("username=alice")
    assert settings.session_cookie_name in client.cookies
    assert gql(client, AUTH_USER)["data"]["authUser"]["id"] == user["id"]


def test_duplicate_sign_up_is_rejected(client):
    sign_up(client)

    body = gql(
        client,
        SIGN_UP,
        {"input": {"username": "alice", "name": "Other", "password": "whatever"}},
    )

    assert body["errors"][0]["message"] == "User already exists"


def test_login_logout_cycle(client):
    user = sign_up(client)
    gql(client, LOGOUT)
    client.cookies.clear()

    assert gql(client, TRANSACTIONS)["errors"][0]["message"] == "Unauthorized"

    bad = gql(client, LOGIN, {"input": {"username": "alice", "password": "wrong"}})
    assert bad["errors"][0]["message"] == "Invalid credentials"

    good = gql(client, LOGIN, {"input": {"username": "alice", "password": "s3cret-pass"}})
    assert good["data"]["login"]["id"] == user["id"]
    assert gql(client, TRANSACTIONS) == {"data": {"transactions": []}}


def test_logout_returns_message(client):
    sign_up(client)

    body = gql(client, LOGOUT)

    assert body == {"data": {"logout": {"message": "Logged out successfully"}}}


def test_create_and_list_transactions(client):
    user = sign_up(client)

    created = create(client, "Groceries", 42.5, "expense", payment_type="cash")

    assert created["userId"] == user["id"]
    assert created["category"] == "expense"
    assert created["paymentType"] == "cash"
    assert created["date"] == "2024-05-01"

    body = gql(client, TRANSACTIONS)
    assert body["data"]["transactions"] == [
        {
            "id": created["id"],
            "description": "Groceries",
            "category": "expense",
            "amount": 42.5,
            "user": {"username": "alice"},
        }
    ]


def test_create_with_unknown_category_is_rejected(client):
    sign_up(client)

    body = gql(
        client,
        CREATE,
        {
            "input": {
                "description": "Trip",
                "amount": 300,
                "category": "vacation",
                "paymentType": "card",
                "date": "2024-05-01",
            }
        },
    )

    assert body.get("errors")
    assert gql(client, TRANSACTIONS) == {"data": {"transactions": []}}


def test_create_with_negative_amount_reports_generic_error(client):
    sign_up(client)

    body = gql(
        client,
        CREATE,
        {
            "input": {
                "description": "Refund",
                "amount": -5,
                "category": "expense",
                "paymentType": "card",
                "date": "2024-05-01",
            }
        },
    )

    assert body["errors"][0]["message"] == "Error creating transaction"


def test_category_statistics(client):
    sign_up(client)
    create(client, "a", 50, "expense")
    create(client, "b", 75, "expense")
    create(client, "c", 100, "investment")
    create(client, "d", 30, "saving")
    create(client, "e", 20, "saving")

    statistics = gql(client, STATISTICS)["data"]["categoryStatistics"]

    assert sorted(statistics, key=lambda s: s["category"]) == [
        {"category": "expense", "totalAmount": 125.0},
        {"category": "investment", "totalAmount": 100.0},
        {"category": "saving", "totalAmount": 50.0},
    ]


def test_statistics_are_scoped_to_caller(client):
    sign_up(client, "alice")
    create(client, "rent", 900, "expense")
    gql(client, LOGOUT)
    client.cookies.clear()

    sign_up(client, "bob")

    assert gql(client, STATISTICS) == {"data": {"categoryStatistics": []}}


def test_get_update_delete_by_id(client):
    sign_up(client)
    created = create(client, "Coffee", 4.5, "expense")

    fetched = gql(client, TRANSACTION, {"id": created["id"]})
    assert fetched["data"]["transaction"]["description"] == "Coffee"

    updated = gql(
        client,
        UPDATE,
        {"input": {"transactionId": created["id"], "amount": 6.0, "category": "saving"}},
    )
    assert updated["data"]["updateTransaction"] == {
        "id": created["id"],
        "description": "Coffee",
        "amount": 6.0,
        "category": "saving",
    }

    deleted = gql(client, DELETE, {"id": created["id"]})
    assert deleted["data"]["deleteTransaction"] == {"id": created["id"]}
    assert gql(client, TRANSACTION, {"id": created["id"]}) == {"data": {"transaction": None}}


def test_by_id_operations_on_missing_transaction_return_null(client):
    sign_up(client)

    assert gql(client, TRANSACTION, {"id": "missing"}) == {"data": {"transaction": None}}
    assert gql(client, DELETE, {"id": "missing"}) == {"data": {"deleteTransaction": None}}
    updated = gql(client, UPDATE, {"input": {"transactionId": "missing", "amount": 1.0}})
    assert updated == {"data": {"updateTransaction": None}}


def test_by_id_lookup_does_not_check_owner_by_default(client):
    sign_up(client, "alice")
    created = create(client, "Private", 10, "expense")
    gql(client, LOGOUT)
    client.cookies.clear()

    body = gql(client, TRANSACTION, {"id": created["id"]})

    assert body["data"]["transaction"]["id"] == created["id"]


def test_owner_check_when_enforced(settings, text_generator):
    enforced = settings.model_copy(update={"enforce_transaction_ownership": True})
    with TestClient(create_app(enforced, text_generator=text_generator)) as client:
        sign_up(client, "alice")
        created = create(client, "Private", 10, "expense")
        gql(client, LOGOUT)
        client.cookies.clear()
        sign_up(client, "bob")

        fetched = gql(client, TRANSACTION, {"id": created["id"]})
        deleted = gql(client, DELETE, {"id": created["id"]})

    assert fetched["errors"][0]["message"] == "Unauthorized"
    assert deleted["errors"][0]["message"] == "Unauthorized"


def test_advice_without_transactions(client, text_generator):
    sign_up(client)

    body = gql(client, ADVICE)

    assert body == {"data": {"getAIResponse": NO_TRANSACTIONS_MESSAGE}}
    assert text_generator.prompts == []


def test_advice_uses_history(client, text_generator):
    sign_up(client)
    create(client, "Old rent", 900, "expense", date="2024-04-01")
    create(client, "New savings", 250, "saving", date="2024-05-01")

    body = gql(client, ADVICE)

    assert body == {"data": {"getAIResponse": text_generator.reply}}
    (prompt,) = text_generator.prompts
    assert prompt.index("New savings") < prompt.index("Old rent")
    assert "- Total Expenses: $900.00" in prompt
    assert "- Total Savings: $250.00" in prompt


def test_advice_failure_returns_fallback(settings, failing_text_generator):
    with TestClient(create_app(settings, text_generator=failing_text_generator)) as client:
        sign_up(client)
        create(client, "Rent", 900, "expense")

        body = gql(client, ADVICE)

    assert body == {"data": {"getAIResponse": FALLBACK_MESSAGE}}


STORE_FAILURE = "no such table: transactions"


class BrokenTransactionService:
    async def _fail(self, *args, **kwargs):
        raise aiosqlite.OperationalError(STORE_FAILURE)

    list_for_owner = _fail
    history_for_owner = _fail
    get_by_id = _fail
    create = _fail
    update = _fail
    delete = _fail
    category_statistics = _fail


class BrokenUserService:
    async def _fail(self, *args, **kwargs):
        raise aiosqlite.OperationalError("disk I/O error")

    sign_up = _fail
    authenticate = _fail
    get_by_id = _fail


class FlakyUserService:
    """Resolves the session's user once, then fails every later lookup."""

    def __init__(self, user: UserResponse) -> None:
        self._user = user
        self.calls = 0

    async def get_by_id(self, user_id: str) -> UserResponse:
        self.calls += 1
        if self.calls > 1:
            raise aiosqlite.OperationalError("database is locked")
        return self._user


def test_long_multibyte_password_is_rejected_at_sign_up(client):
    body = gql(
        client,
        SIGN_UP,
        {"input": {"username": "zoe", "name": "Zoe", "password": "é" * 40}},
    )

    assert body["errors"][0]["message"] == "Invalid user details"


def test_multibyte_password_at_the_byte_limit_works(client):
    password = "é" * 36
    user = sign_up(client, "zoe", password=password)
    gql(client, LOGOUT)
    client.cookies.clear()

    body = gql(client, LOGIN, {"input": {"username": "zoe", "password": password}})

    assert body["data"]["login"]["id"] == user["id"]


def test_overlong_login_password_is_invalid_credentials(client):
    sign_up(client)
    gql(client, LOGOUT)
    client.cookies.clear()

    body = gql(client, LOGIN, {"input": {"username": "alice", "password": "x" * 100}})

    assert body["errors"][0]["message"] == "Invalid credentials"


def test_store_failures_surface_generic_messages(app, client):
    sign_up(client)
    created = create(client, "Rent", 900, "expense")
    app.dependency_overrides[get_transaction_service] = BrokenTransactionService

    responses = {
        "Error getting transactions": client.post("/graphql", json={"query": TRANSACTIONS}),
        "Error getting transaction": client.post(
            "/graphql", json={"query": TRANSACTION, "variables": {"id": created["id"]}}
        ),
        "Error getting category statistics": client.post(
            "/graphql", json={"query": STATISTICS}
        ),
        "Error creating transaction": client.post(
            "/graphql",
            json={
                "query": CREATE,
                "variables": {
                    "input": {
                        "description": "Coffee",
                        "amount": 3,
                        "category": "expense",
                        "paymentType": "cash",
                        "date": "2024-05-02",
                    }
                },
            },
        ),
        "Error updating transaction": client.post(
            "/graphql",
            json={
                "query": UPDATE,
                "variables": {"input": {"transactionId": created["id"], "amount": 1.0}},
            },
        ),
        "Error deleting transaction": client.post(
            "/graphql", json={"query": DELETE, "variables": {"id": created["id"]}}
        ),
    }

    for message, response in responses.items():
        assert response.json()["errors"][0]["message"] == message
        assert STORE_FAILURE not in response.text


def test_advice_history_failure_returns_fallback(app, client, text_generator):
    sign_up(client)
    app.dependency_overrides[get_transaction_service] = BrokenTransactionService

    body = gql(client, ADVICE)

    assert body == {"data": {"getAIResponse": FALLBACK_MESSAGE}}
    assert text_generator.prompts == []


def test_unexpected_sign_up_failure_is_internal_server_error(app, client):
    app.dependency_overrides[get_user_service] = BrokenUserService

    body = gql(
        client,
        SIGN_UP,
        {"input": {"username": "alice", "name": "Alice", "password": "s3cret-pass"}},
    )

    assert body["errors"][0]["message"] == "Internal server error"
    assert "disk I/O error" not in str(body)


def test_unexpected_login_failure_is_internal_server_error(app, client):
    app.dependency_overrides[get_user_service] = BrokenUserService

    body = gql(client, LOGIN, {"input": {"username": "alice", "password": "s3cret-pass"}})

    assert body["errors"][0]["message"] == "Internal server error"


def test_auth_user_lookup_failure_is_null(app, client):
    user = sign_up(client)
    flaky = FlakyUserService(
        UserResponse(
            id=user["id"],
            username=user["username"],
            name=user["name"],
            email=user["email"],
            profile_picture=user["profilePicture"],
            created_at="2024-05-01T00:00:00+00:00",
        )
    )
    app.dependency_overrides[get_user_service] = lambda: flaky

    body = gql(client, AUTH_USER)

    assert body == {"data": {"authUser": None}}
    assert flaky.calls == 2
