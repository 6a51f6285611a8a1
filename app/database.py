from sqlalchemy import create_engine, Enum
from sqlalchemy.orm import sessionmaker, declarative_base

from app.config import settings
from app.constants import Category, enum_values


def _normalize_database_url(url: str) -> str:
    # Hosted Postgres often hands out postgres://, SQLAlchemy wants postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


DATABASE_URL = _normalize_database_url(settings.DATABASE_URL)

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# One named type for expenses.category and budgets.category; the approval
# debit compares the two columns, which PostgreSQL only allows on equal types
CategoryType = Enum(Category, values_callable=enum_values, name="category", metadata=Base.metadata)


# dependency (one session per request)
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create missing tables. Model modules are imported so every table is registered."""
    from app.users import models as user_models  # noqa: F401
    from app.expenses import models as expense_models  # noqa: F401
    from app.budgets import models as budget_models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
