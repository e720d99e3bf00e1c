"""
Request / response contracts for the ledger API.

Amounts coming in are user-facing decimals (12.50); amounts going out are
integer minor units (1250). Patch models only carry the fields the client
actually sent (see `present_fields`).
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from config import DEFAULT_ALERT_THRESHOLD

EntryKind = Literal["income", "expense"]
AccountType = Literal["cash", "bank"]


class PatchModel(BaseModel):
    """
    Base for partial updates.

    Fields listed in `non_nullable` may be omitted but not sent as null.
    """

    non_nullable: ClassVar[tuple] = ()

    @model_validator(mode="after")
    def _reject_null_required_fields(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def present_fields(self) -> set:
        return set(self.model_fields_set)


# -------------------------------------------------------------------
# Auth / users
# -------------------------------------------------------------------

class LoginRequest(BaseModel):
    passphrase: Optional[str] = None
    open_id: Optional[str] = Field(None, max_length=64)
    name: Optional[str] = None
    email: Optional[str] = Field(None, max_length=320)


class LoginResponse(BaseModel):
    user_id: int
    open_id: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str
    created_at: datetime
    updated_at: datetime
    last_signed_in: datetime


# -------------------------------------------------------------------
# Generic mutation results
# -------------------------------------------------------------------

class CreatedResponse(BaseModel):
    id: int


class AffectedResponse(BaseModel):
    affected: int


# -------------------------------------------------------------------
# Categories
# -------------------------------------------------------------------

class CategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    kind: EntryKind
    parent_id: Optional[int] = None
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=20)


class CategoryPatch(PatchModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    non_nullable: ClassVar[tuple] = ("name", "kind")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    kind: Optional[EntryKind] = None
    parent_id: Optional[int] = None
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=20)


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    kind: EntryKind
    parent_id: Optional[int] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime


# -------------------------------------------------------------------
# Transactions
# -------------------------------------------------------------------

class TransactionCreate(BaseModel):
    category_id: int
    amount: Decimal = Field(..., gt=0)
    kind: EntryKind
    transaction_date: str
    person: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None


class TransactionPatch(PatchModel):
    non_nullable: ClassVar[tuple] = ("category_id", "amount", "transaction_date")

    category_id: Optional[int] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    person: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    transaction_date: Optional[str] = None


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    category_id: int
    amount: int
    kind: EntryKind
    person: Optional[str] = None
    description: Optional[str] = None
    transaction_date: datetime
    created_at: datetime
    updated_at: datetime


# -------------------------------------------------------------------
# Budgets
# -------------------------------------------------------------------

class BudgetCreate(BaseModel):
    category_id: Optional[int] = None
    amount: Decimal = Field(..., gt=0)
    month: str
    alert_threshold: int = Field(DEFAULT_ALERT_THRESHOLD, ge=0, le=100)


class BudgetPatch(PatchModel):
    non_nullable: ClassVar[tuple] = ("amount", "alert_threshold")

    amount: Optional[Decimal] = Field(None, gt=0)
    alert_threshold: Optional[int] = Field(None, ge=0, le=100)


class BudgetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    category_id: Optional[int] = None
    amount: int
    month: str
    alert_threshold: int
    created_at: datetime
    updated_at: datetime


class BudgetStatusOut(BudgetOut):
    spent: int
    percentage: float
    display_percentage: float
    is_over_budget: bool
    is_near_limit: bool


# -------------------------------------------------------------------
# Stats / reports
# -------------------------------------------------------------------

class BalanceOut(BaseModel):
    income: int
    expense: int
    balance: int


class CategoryTotalOut(BaseModel):
    category_id: int
    total: int


class MonthlySummaryOut(BalanceOut):
    month: str
    by_category: List[CategoryTotalOut]


# -------------------------------------------------------------------
# Savings
# -------------------------------------------------------------------

class SavingCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    account_type: AccountType = "cash"
    month: str
    note: Optional[str] = None


class SavingPatch(PatchModel):
    non_nullable: ClassVar[tuple] = ("amount", "account_type", "month")

    amount: Optional[Decimal] = Field(None, gt=0)
    account_type: Optional[AccountType] = None
    month: Optional[str] = None
    note: Optional[str] = None


class SavingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    amount: int
    account_type: AccountType
    month: str
    note: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class WithdrawalCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    account_type: AccountType = "cash"
    withdrawal_date: str
    reason: Optional[str] = None


class WithdrawalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    amount: int
    account_type: AccountType
    withdrawal_date: datetime
    reason: Optional[str] = None
    created_at: datetime


class SavingsTotalsOut(BaseModel):
    total_savings: int
    total_withdrawals: int
    balance: int
