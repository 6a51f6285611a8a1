from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.constants import ExpenseStatus
from app.database import get_db
from app.schemas import MessageResponse
from app.users.auth import get_current_user
from app.users.permissions import admin_required
from app.users.schemas import UserDisplaySchema
from . import schemas, service


router = APIRouter()


@router.post("", response_model=schemas.ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense: schemas.ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user),
):
    new_expense = service.submit_expense(db, expense, employee_id=current_user.id)
    return {"success": True, "expense": new_expense}


@router.get("", response_model=schemas.ExpenseListResponse)
def list_expenses(
    status: Optional[ExpenseStatus] = Query(None, description="pending | approved | rejected"),
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user),
):
    """Employees get their own claims, admins get everyone's."""
    expenses = service.list_expenses(db, current_user, status=status)
    return {"success": True, "count": len(expenses), "expenses": expenses}


@router.get("/{expense_id}", response_model=schemas.ExpenseResponse)
def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user),
):
    return {"success": True, "expense": service.get_expense(db, expense_id, current_user)}


@router.put("/{expense_id}", response_model=schemas.ExpenseResponse)
def update_expense(
    expense_id: int,
    expense: schemas.ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user),
):
    updated = service.edit_expense(db, expense_id, current_user, expense)
    return {"success": True, "expense": updated}


@router.delete("/{expense_id}", response_model=MessageResponse)
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user),
):
    return service.withdraw_expense(db, expense_id, current_user)


@router.put("/{expense_id}/status", response_model=schemas.ExpenseResponse)
def update_expense_status(
    expense_id: int,
    review: schemas.ExpenseStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(admin_required),
):
    expense = service.review_expense(
        db,
        expense_id,
        reviewer_id=current_user.id,
        decision=review.status,
        review_notes=review.review_notes,
    )
    return {"success": True, "expense": expense}
