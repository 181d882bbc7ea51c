import pytest
from fastapi.testclient import TestClient

from finance_tracker.config import Settings
from finance_tracker.database import Database
from finance_tracker.main import create_app

SESSION_SECRET = "test-session-secret-that-is-long-enough"


class FakeTextGenerator:
    def __init__(self, reply: str = "**Spend less**\n- Cook at home") -> None:
        self.reply = reply
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


class FailingTextGenerator:
    def __init__(self) -> None:
        self.calls = 0

    async def generate(self, prompt: str) -> str:
        self.calls += 1
        raise ConnectionError("model endpoint unreachable")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        session_secret=SESSION_SECRET,
        db_path=str(tmp_path / "finance_tracker.db"),
        google_api_key="",
        openai_api_key="",
        anthropic_api_key="",
    )


@pytest.fixture
async def database(settings):
    db = Database(settings.db_path)
    await db.connect()
    yield db
    await db.close()


@pytest.fixture
def text_generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def failing_text_generator() -> FailingTextGenerator:
    return FailingTextGenerator()


@pytest.fixture
def app(settings, text_generator):
    return create_app(settings, text_generator=text_generator)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
