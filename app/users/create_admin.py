#!/usr/bin/env python3
"""Create the first admin account from the command line.

    python -m app.users.create_admin --name "Jane Admin" --email jane@example.com
"""
import argparse
import getpass
import sys

from sqlalchemy.orm import Session

from app.constants import Role, PASSWORD_MIN_LENGTH
from app.database import SessionLocal, init_db
from app.errors import DuplicateError, ValidationError
from app.users import crud as user_crud
from app.users.auth import hash_password


def create_admin(db: Session, name: str, email: str, password: str):
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    return user_crud.create_user(
        db,
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=Role.ADMIN,
    )


def prompt_hidden(prompt_text: str) -> str:
    return getpass.getpass(prompt_text)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create a SpendWise admin account.")
    parser.add_argument("--name", required=True, help="Display name of the admin")
    parser.add_argument("--email", required=True, help="Login email of the admin")
    args = parser.parse_args(argv)

    password = prompt_hidden("Enter admin password (hidden): ").strip()
    if not password:
        print("No password entered. Exiting.")
        return 1
    if password != prompt_hidden("Confirm admin password: ").strip():
        print("Passwords do not match. Exiting.")
        return 1

    init_db()
    db = SessionLocal()
    try:
        user = create_admin(db, args.name, args.email, password)
    except (DuplicateError, ValidationError) as exc:
        print(f"[ERROR] {exc.detail}")
        return 2
    finally:
        db.close()

    print(f"[OK] Admin {user.email} created (id={user.id}).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
