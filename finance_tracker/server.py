import uvicorn

from finance_tracker.config import Settings
from finance_tracker.main import create_app


def run() -> None:
    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
