from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.errors import DuplicateError, NotFoundError, UnexpectedError
from app.expenses import models as expense_models
from . import models, schemas


def _get_budget_or_404(db: Session, budget_id: int) -> models.Budget:
    budget = (
        db.query(models.Budget)
        .options(joinedload(models.Budget.created_by))
        .filter(models.Budget.id == budget_id)
        .first()
    )
    if not budget:
        raise NotFoundError("Budget not found")
    return budget


def _commit_or_duplicate(db: Session, category) -> None:
    try:
        db.commit()
    except IntegrityError:
        # unique(category) lost a race with another writer
        db.rollback()
        logger.warning(f"Duplicate budget rejected for category: {category.value}")
        raise DuplicateError(f"Budget already exists for category: {category.value}")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to persist budget")
        raise UnexpectedError("Failed to save budget")


# ================= CREATE =================
def create_budget(db: Session, budget: schemas.BudgetCreate, creator_id: int) -> models.Budget:
    existing = (
        db.query(models.Budget)
        .filter(models.Budget.category == budget.category)
        .first()
    )
    if existing:
        logger.warning(f"Duplicate budget rejected for category: {budget.category.value}")
        raise DuplicateError(f"Budget already exists for category: {budget.category.value}")

    db_budget = models.Budget(
        category=budget.category,
        total_amount=budget.total_amount,
        spent_amount=0.0,
        period=budget.period,
        created_by_id=creator_id,
    )
    db.add(db_budget)
    _commit_or_duplicate(db, budget.category)
    db.refresh(db_budget)

    logger.info(f"Budget {db_budget.id} created for {db_budget.category.value}: {db_budget.total_amount}")
    return db_budget


# ================= LIST / GET =================
def list_budgets(db: Session):
    return (
        db.query(models.Budget)
        .options(joinedload(models.Budget.created_by))
        .order_by(models.Budget.category)
        .all()
    )


def get_budget(db: Session, budget_id: int) -> models.Budget:
    return _get_budget_or_404(db, budget_id)


# ================= UPDATE =================
def update_budget(db: Session, budget_id: int, budget_update: schemas.BudgetUpdate) -> models.Budget:
    db_budget = _get_budget_or_404(db, budget_id)
    data = budget_update.model_dump(exclude_unset=True)

    new_category = data.get("category")
    if new_category is not None and new_category != db_budget.category:
        taken = (
            db.query(models.Budget)
            .filter(models.Budget.category == new_category)
            .filter(models.Budget.id != budget_id)
            .first()
        )
        if taken:
            raise DuplicateError(f"Budget already exists for category: {new_category.value}")

    # Full overwrite, spent_amount included
    for key, value in data.items():
        setattr(db_budget, key, value)

    _commit_or_duplicate(db, db_budget.category)
    db.refresh(db_budget)

    logger.info(f"Budget {budget_id} updated: {sorted(data)}")
    return db_budget


# ================= DELETE =================
def delete_budget(db: Session, budget_id: int) -> dict:
    db_budget = _get_budget_or_404(db, budget_id)

    db.delete(db_budget)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to delete budget {budget_id}")
        raise UnexpectedError("Failed to delete budget")

    logger.info(f"Budget {budget_id} deleted")
    return {"success": True, "message": "Budget deleted successfully"}


# ================= DEBIT =================
def debit_statement(expense_id: int):
    """UPDATE adding the expense's amount to its category's budget, read in-database."""
    Expense = expense_models.Expense
    amount = select(Expense.amount).where(Expense.id == expense_id).scalar_subquery()
    category = select(Expense.category).where(Expense.id == expense_id).scalar_subquery()

    return (
        update(models.Budget)
        .where(models.Budget.category == category)
        .values(spent_amount=models.Budget.spent_amount + amount)
        .execution_options(synchronize_session=False)
    )


def debit_for_expense(db: Session, expense_id: int) -> int:
    """Add an expense's amount to the spent total of its category's budget.

    Runs inside the caller's transaction and does not commit. The increment
    happens in the database, reading amount and category from the expense
    row itself. Returns the number of budgets debited (0 when the category
    has no budget, which is not an error).
    """
    return db.execute(debit_statement(expense_id)).rowcount
