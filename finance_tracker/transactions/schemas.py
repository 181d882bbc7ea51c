import datetime

from pydantic import BaseModel, Field

from finance_tracker.transactions.models import Category, PaymentType


class TransactionCreate(BaseModel):
    description: str = Field(min_length=1)
    payment_type: PaymentType
    category: Category
    amount: float = Field(ge=0)
    date: datetime.date


class TransactionUpdate(BaseModel):
    description: str | None = Field(default=None, min_length=1)
    payment_type: PaymentType | None = None
    category: Category | None = None
    amount: float | None = Field(default=None, ge=0)
    date: datetime.date | None = None


class TransactionResponse(BaseModel):
    id: str
    user_id: str
    description: str
    payment_type: PaymentType
    category: Category
    amount: float
    date: datetime.date
    created_at: str
    updated_at: str


class CategoryStatistic(BaseModel):
    category: Category
    total_amount: float
