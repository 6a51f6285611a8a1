"""Enumerations shared by users, expenses and budgets."""

import enum


class Role(str, enum.Enum):
    EMPLOYEE = "employee"
    ADMIN = "admin"


class Category(str, enum.Enum):
    """Classification shared by Expense and Budget; a budget is matched by it."""

    TRAVEL = "Travel"
    MEALS = "Meals"
    OFFICE_SUPPLIES = "Office Supplies"
    SOFTWARE = "Software"
    HARDWARE = "Hardware"
    TRAINING = "Training"
    OTHER = "Other"


class ExpenseStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Decisions an admin may record on a pending expense
REVIEW_DECISIONS = (ExpenseStatus.APPROVED, ExpenseStatus.REJECTED)

DESCRIPTION_MAX_LENGTH = 500
REVIEW_NOTES_MAX_LENGTH = 500
PASSWORD_MIN_LENGTH = 6


def enum_values(enum_cls):
    """Persist enum values ("Office Supplies") rather than member names."""
    return [member.value for member in enum_cls]
