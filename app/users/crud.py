from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.constants import Role
from app.errors import DuplicateError
from app.users.models import User


def get_user(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(db: Session, name: str, email: str, hashed_password: str, role: Role = Role.EMPLOYEE):
    email = email.strip().lower()
    if get_user_by_email(db, email):
        raise DuplicateError("User already exists with this email")

    new_user = User(
        name=name.strip(),
        email=email,
        hashed_password=hashed_password,
        role=role,
    )
    try:
        db.add(new_user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError("User already exists with this email")
    db.refresh(new_user)
    return new_user
