from typing import Annotated

from fastapi import Depends, Request

from finance_tracker.advice.composer import AdviceComposer
from finance_tracker.advice.generator import TextGenerator
from finance_tracker.config import Settings
from finance_tracker.database import Database
from finance_tracker.transactions.repository import TransactionRepository
from finance_tracker.transactions.service import TransactionService
from finance_tracker.users.repository import UserRepository
from finance_tracker.users.service import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_text_generator(request: Request) -> TextGenerator:
    return request.app.state.text_generator


SettingsDep = Annotated[Settings, Depends(get_settings)]
DatabaseDep = Annotated[Database, Depends(get_database)]
TextGeneratorDep = Annotated[TextGenerator, Depends(get_text_generator)]


def get_transaction_service(database: DatabaseDep) -> TransactionService:
    return TransactionService(TransactionRepository(database.connection))


def get_user_service(database: DatabaseDep, settings: SettingsDep) -> UserService:
    return UserService(UserRepository(database.connection), settings)


def get_advice_composer(generator: TextGeneratorDep) -> AdviceComposer:
    return AdviceComposer(generator)


TransactionServiceDep = Annotated[TransactionService, Depends(get_transaction_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AdviceComposerDep = Annotated[AdviceComposer, Depends(get_advice_composer)]
