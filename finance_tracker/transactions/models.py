from enum import StrEnum


class Category(StrEnum):
    expense = "expense"
    saving = "saving"
    investment = "investment"


class PaymentType(StrEnum):
    cash = "cash"
    card = "card"
