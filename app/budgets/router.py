from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.users.auth import get_current_user
from app.users.permissions import admin_required
from app.users.schemas import UserDisplaySchema
from app.schemas import MessageResponse
from . import schemas, service


router = APIRouter()


# ================= CREATE =================
@router.post("", response_model=schemas.BudgetResponse, status_code=status.HTTP_201_CREATED)
def create_budget(
    budget: schemas.BudgetCreate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(admin_required),
):
    new_budget = service.create_budget(db, budget, creator_id=current_user.id)
    return {"success": True, "budget": new_budget}


# ================= LIST =================
@router.get("", response_model=schemas.BudgetListResponse)
def list_budgets(
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user),
):
    budgets = service.list_budgets(db)
    return {"success": True, "count": len(budgets), "budgets": budgets}


@router.get("/{budget_id}", response_model=schemas.BudgetResponse)
def get_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user),
):
    return {"success": True, "budget": service.get_budget(db, budget_id)}


# ================= UPDATE =================
@router.put("/{budget_id}", response_model=schemas.BudgetResponse)
def update_budget(
    budget_id: int,
    budget: schemas.BudgetUpdate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(admin_required),
):
    return {"success": True, "budget": service.update_budget(db, budget_id, budget)}


# ================= DELETE =================
@router.delete("/{budget_id}", response_model=MessageResponse)
def delete_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(admin_required),
):
    return service.delete_budget(db, budget_id)
