"""Pydantic models for bookkeeping records, budgets and accounts."""

import datetime as dt
from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, Field, field_validator


UNCATEGORIZED = "未分類"


class RecordType(str, Enum):
    """Bookkeeping record types."""
    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"


class Record(BaseModel):
    """A single bookkeeping entry."""
    id: Optional[Union[int, str]] = Field(default=None, description="Record identifier")
    type: RecordType = Field(default=RecordType.EXPENSE, description="Record type (missing means expense)")
    date: dt.date = Field(..., description="Calendar date of the record")
    amount: float = Field(default=0.0, description="Amount in NT$")
    category: Optional[str] = Field(default=None, description="Category name")
    account: Optional[Union[int, str]] = Field(default=None, description="Account id")
    member: Optional[str] = Field(default=None, description="Family member the record belongs to")
    note: Optional[str] = Field(default=None, description="Free-form note")

    class Config:
        """Pydantic config."""
        use_enum_values = True
        extra = "allow"

    @field_validator("type", mode="before")
    @classmethod
    def _missing_type_is_expense(cls, value):
        if value is None or value == "":
            return RecordType.EXPENSE
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def _missing_amount_is_zero(cls, value):
        if value is None or value == "":
            return 0.0
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_datetime(cls, value):
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str):
            value = value.strip()
            if len(value) > 10 and value[10] in ("T", " "):
                return value[:10]
        return value

    @property
    def category_name(self) -> str:
        """Category, or the uncategorised label."""
        return self.category or UNCATEGORIZED

    @property
    def is_expense(self) -> bool:
        return self.type == RecordType.EXPENSE

    @property
    def is_income(self) -> bool:
        return self.type == RecordType.INCOME

    @property
    def is_transfer(self) -> bool:
        return self.type == RecordType.TRANSFER


class Budget(BaseModel):
    """Monthly budget for one category."""
    category: str = Field(..., description="Category the budget applies to")
    amount: float = Field(..., gt=0, description="Monthly budget amount in NT$")


class Account(BaseModel):
    """Account a record can be booked against."""
    id: Union[int, str] = Field(..., description="Account identifier")
    name: str = Field(..., description="Display name")


class Ledger(BaseModel):
    """Everything the advisor reads: records, budgets and accounts."""
    records: List[Record] = Field(default_factory=list, description="Bookkeeping records")
    budgets: List[Budget] = Field(default_factory=list, description="Monthly category budgets")
    accounts: List[Account] = Field(default_factory=list, description="Known accounts")

    class Config:
        """Pydantic config."""
        extra = "allow"

    def account_name(self, account_id: Optional[Union[int, str]]) -> Optional[str]:
        """Resolve an account id to its display name."""
        if account_id is None or account_id == "":
            return None
        for account in self.accounts:
            if str(account.id) == str(account_id):
                return account.name
        return None

    def budget_for(self, category: Optional[str]) -> Optional[Budget]:
        """First budget configured for a category."""
        for budget in self.budgets:
            if budget.category == category:
                return budget
        return None

    def with_record(self, record: Record) -> "Ledger":
        """Copy of this ledger with one more record appended."""
        return self.model_copy(update={"records": [*self.records, record]})
