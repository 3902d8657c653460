import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.errors import ValidationError
from ..core.security import create_access_token, get_password_hash, verify_password
from ..models.user import User
from ..schemas.user import (
    INVALID_EMAIL_MESSAGE,
    PASSWORD_POLICY_MESSAGE,
    AuthResponse,
    UserLogin,
    UserRegister,
    check_password_policy,
    is_valid_email,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        token=create_access_token(user.id, user.username),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserRegister, db: Session = Depends(get_db)):
    """Create an account and return a fresh credential token"""
    if db.scalars(select(User).where(User.username == user_in.username)).first():
        raise ValidationError("This username is already in use")
    if db.scalars(select(User).where(User.email == user_in.email)).first():
        raise ValidationError("This email address is already in use")
    if not check_password_policy(user_in.password):
        raise ValidationError(PASSWORD_POLICY_MESSAGE)
    if not is_valid_email(user_in.email):
        raise ValidationError(INVALID_EMAIL_MESSAGE)

    user = User(
        username=user_in.username,
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same identity
        db.rollback()
        raise ValidationError("This username or email address is already in use")
    db.refresh(user)

    logger.info(f"Registered user {user.id} ({user.username})")
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Exchange email and password for a fresh credential token"""
    user = db.scalars(select(User).where(User.email == credentials.email)).first()
    if user is None:
        raise ValidationError("No account found for this email address. Retry again")
    if not verify_password(credentials.password, user.hashed_password):
        logger.warning(f"Incorrect password for user {user.id}")
        raise ValidationError("Incorrect password. Retry again")
    return _auth_response(user)
