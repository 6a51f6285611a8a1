"""Expense claims and their approval workflow.

A claim is created ``pending`` and moves exactly once, by an admin, to
``approved`` or ``rejected``. Approval debits the budget of the same
category in the same transaction as the status change. Every write that
depends on the claim still being pending is a conditional update on
``status = 'pending'``, so concurrent reviews or a review racing an edit
cannot both win.
"""

from datetime import datetime

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.budgets import service as budget_service
from app.constants import ExpenseStatus
from app.errors import InvalidStateError, NotFoundError, UnexpectedError
from app.users import permissions
from app.users.schemas import UserDisplaySchema
from . import models, schemas


# =========================
# Helper: load or 404
# =========================
def _get_expense_or_404(db: Session, expense_id: int) -> models.Expense:
    expense = (
        db.query(models.Expense)
        .options(
            joinedload(models.Expense.employee),
            joinedload(models.Expense.reviewed_by),
        )
        .filter(models.Expense.id == expense_id)
        .first()
    )
    if not expense:
        raise NotFoundError("Expense not found")
    return expense


def _pending_only(db: Session, expense_id: int):
    return db.query(models.Expense).filter(
        models.Expense.id == expense_id,
        models.Expense.status == ExpenseStatus.PENDING,
    )


def _status_after_lost_write(db: Session, expense_id: int) -> str:
    """Undo a conditional write that matched no row and return the status that beat it."""
    db.rollback()
    status = db.query(models.Expense.status).filter(models.Expense.id == expense_id).scalar()
    if status is None:
        # withdrawn in the meantime
        raise NotFoundError("Expense not found")
    return status.value


# =========================
# Submit
# =========================
def submit_expense(db: Session, expense: schemas.ExpenseCreate, employee_id: int) -> models.Expense:
    new_expense = models.Expense(
        employee_id=employee_id,
        amount=expense.amount,
        category=expense.category,
        description=expense.description,
        date=expense.date or datetime.utcnow(),
        receipt_url=expense.receipt_url,
        status=ExpenseStatus.PENDING,
    )

    try:
        db.add(new_expense)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to persist expense")
        raise UnexpectedError("Failed to create expense")

    db.refresh(new_expense)
    logger.info(
        f"Expense {new_expense.id} submitted by user {employee_id}: "
        f"{new_expense.amount} ({new_expense.category.value})"
    )
    return new_expense


# =========================
# List / Get
# =========================
def list_expenses(
    db: Session,
    current_user: UserDisplaySchema,
    status: ExpenseStatus | None = None,
):
    query = db.query(models.Expense).options(
        joinedload(models.Expense.employee),
        joinedload(models.Expense.reviewed_by),
    )

    # Employees only ever see their own claims
    if not permissions.is_admin(current_user):
        query = query.filter(models.Expense.employee_id == current_user.id)

    if status:
        query = query.filter(models.Expense.status == status)

    return (
        query
        .order_by(models.Expense.created_at.desc(), models.Expense.id.desc())
        .all()
    )


def get_expense(db: Session, expense_id: int, current_user: UserDisplaySchema) -> models.Expense:
    expense = _get_expense_or_404(db, expense_id)
    permissions.ensure_can_view(expense.employee_id, current_user)
    return expense


# =========================
# Edit (owner, pending only)
# =========================
def edit_expense(
    db: Session,
    expense_id: int,
    current_user: UserDisplaySchema,
    expense_data: schemas.ExpenseUpdate,
) -> models.Expense:
    expense = _get_expense_or_404(db, expense_id)

    # Ownership is checked before state
    permissions.ensure_owner(expense.employee_id, current_user, "update")
    if expense.status != ExpenseStatus.PENDING:
        raise InvalidStateError(f"Cannot update expense with status: {expense.status.value}")

    data = expense_data.model_dump(exclude_unset=True)
    if not data:
        return expense

    try:
        updated = _pending_only(db, expense_id).update(data, synchronize_session=False)
        if not updated:
            # reviewed between our read and our write
            status = _status_after_lost_write(db, expense_id)
            raise InvalidStateError(f"Cannot update expense with status: {status}")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to update expense {expense_id}")
        raise UnexpectedError("Failed to update expense")

    db.refresh(expense)
    logger.info(f"Expense {expense_id} edited by user {current_user.id}: {sorted(data)}")
    return expense


# =========================
# Withdraw (owner, pending only)
# =========================
def withdraw_expense(db: Session, expense_id: int, current_user: UserDisplaySchema) -> dict:
    expense = _get_expense_or_404(db, expense_id)

    permissions.ensure_owner(expense.employee_id, current_user, "delete")
    if expense.status != ExpenseStatus.PENDING:
        raise InvalidStateError(f"Cannot delete expense with status: {expense.status.value}")

    try:
        deleted = _pending_only(db, expense_id).delete(synchronize_session=False)
        if not deleted:
            status = _status_after_lost_write(db, expense_id)
            raise InvalidStateError(f"Cannot delete expense with status: {status}")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to delete expense {expense_id}")
        raise UnexpectedError("Failed to delete expense")

    logger.info(f"Expense {expense_id} withdrawn by user {current_user.id}")
    return {"success": True, "message": "Expense deleted successfully"}


# =========================
# Review (admin)
# =========================
def review_expense(
    db: Session,
    expense_id: int,
    reviewer_id: int,
    decision: ExpenseStatus,
    review_notes: str | None = None,
) -> models.Expense:
    expense = _get_expense_or_404(db, expense_id)
    if expense.status != ExpenseStatus.PENDING:
        raise InvalidStateError(f"Expense has already been reviewed (status: {expense.status.value})")

    try:
        transitioned = _pending_only(db, expense_id).update(
            {
                "status": decision,
                "reviewed_by_id": reviewer_id,
                "reviewed_at": datetime.utcnow(),
                "review_notes": review_notes or "",
            },
            synchronize_session=False,
        )
        if not transitioned:
            # another review committed first
            status = _status_after_lost_write(db, expense_id)
            raise InvalidStateError(f"Expense has already been reviewed (status: {status})")

        debited = 0
        if decision == ExpenseStatus.APPROVED:
            debited = budget_service.debit_for_expense(db, expense_id)

        # status change and debit commit together
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to review expense {expense_id}")
        raise UnexpectedError("Failed to review expense")

    db.refresh(expense)
    logger.info(f"Expense {expense_id} {decision.value} by admin {reviewer_id}")
    if decision == ExpenseStatus.APPROVED:
        if debited:
            logger.info(f"Budget {expense.category.value} debited {expense.amount}")
        else:
            logger.info(f"No budget for category {expense.category.value}; nothing debited")
    return expense
