from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.constants import (
    Category,
    ExpenseStatus,
    REVIEW_DECISIONS,
    DESCRIPTION_MAX_LENGTH,
    REVIEW_NOTES_MAX_LENGTH,
)
from app.schemas import CamelModel
from app.users.schemas import UserBrief


def _clean_description(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Please add a description")
    if len(v) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Description cannot be more than {DESCRIPTION_MAX_LENGTH} characters")
    return v


# =========================
# Create
# =========================
class ExpenseCreate(CamelModel):
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    category: Category
    description: str
    date: Optional[datetime] = None      # defaults to submission time
    receipt_url: Optional[str] = None

    @field_validator("description")
    @classmethod
    def valid_description(cls, v: str) -> str:
        return _clean_description(v)


# =========================
# Update (owner, while pending)
# =========================
class ExpenseUpdate(CamelModel):
    amount: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    category: Optional[Category] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    receipt_url: Optional[str] = None

    @field_validator("amount", "category", "description", "date")
    @classmethod
    def not_null(cls, v):
        # Only runs for fields the client actually sent
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("description")
    @classmethod
    def valid_description(cls, v: str) -> str:
        return _clean_description(v)


# =========================
# Review (admin)
# =========================
class ExpenseStatusUpdate(CamelModel):
    status: ExpenseStatus
    review_notes: Optional[str] = Field(None, max_length=REVIEW_NOTES_MAX_LENGTH)

    @field_validator("status", mode="before")
    @classmethod
    def terminal_status(cls, v):
        if v not in [s.value for s in REVIEW_DECISIONS]:
            raise ValueError("Please provide valid status (approved or rejected)")
        return v


# =========================
# Output
# =========================
class ExpenseOut(CamelModel):
    id: int
    employee: UserBrief
    amount: float
    category: Category
    description: str
    date: datetime
    status: ExpenseStatus
    receipt_url: Optional[str] = None

    reviewed_by: Optional[UserBrief] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None

    created_at: datetime
    updated_at: datetime


class ExpenseResponse(CamelModel):
    success: bool = True
    expense: ExpenseOut


class ExpenseListResponse(CamelModel):
    success: bool = True
    count: int
    expenses: List[ExpenseOut]
