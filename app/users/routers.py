from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from loguru import logger
from sqlalchemy.orm import Session

from app.config import settings
from app.constants import Role
from app.database import get_db
from app.errors import AuthenticationError, AuthorizationError
from app.users import crud as user_crud, schemas
from app.users.auth import authenticate_user, get_current_user, hash_password, token_for

router = APIRouter()


def _auth_payload(user) -> dict:
    return {
        "success": True,
        "token": token_for(user),
        "user": user,
    }


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserSchema, db: Session = Depends(get_db)):
    # Admin accounts need the shared admin secret
    if user.role == Role.ADMIN and user.admin_secret != settings.ADMIN_SECRET:
        logger.warning(f"Admin registration refused for {user.email}")
        raise AuthorizationError("Invalid admin secret. Cannot register as admin.")

    new_user = user_crud.create_user(
        db,
        name=user.name,
        email=user.email,
        hashed_password=hash_password(user.password),
        role=user.role,
    )
    logger.info(f"User registered: {new_user.email} ({new_user.role.value})")
    return _auth_payload(new_user)


@router.post("/login", response_model=schemas.AuthResponse)
def login(credentials: schemas.LoginSchema, db: Session = Depends(get_db)):
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.warning(f"Authentication denied for email: {credentials.email}")
        raise AuthenticationError("Invalid credentials")

    logger.info(f"User authenticated: {user.email}")
    return _auth_payload(user)


@router.post("/token", response_model=schemas.TokenResponse)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """OAuth2 password flow for the interactive docs; username is the email."""
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user:
        logger.warning(f"Authentication denied for email: {form_data.username}")
        raise AuthenticationError("Invalid credentials")

    return {"access_token": token_for(user), "token_type": "bearer"}


@router.get("/me", response_model=schemas.UserResponse)
def get_current_user_info(
    current_user: schemas.UserDisplaySchema = Depends(get_current_user),
):
    return {"success": True, "user": current_user}
