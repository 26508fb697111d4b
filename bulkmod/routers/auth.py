import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import or_, select

from bulkmod.dependencies import CurrentUser, DbSession, Issuer
from bulkmod.models import User
from bulkmod.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
)
from bulkmod.schemas.base import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
def register(request: RegisterRequest, db: DbSession, issuer: Issuer):
    existing = db.execute(
        select(User).where(
            or_(User.email == request.email, User.username == request.username)
        )
    ).scalars().first()
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email or username already exists",
        )

    user = User(username=request.username, email=request.email, password_hash="")
    user.set_password(request.password)
    db.add(user)
    db.flush()
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return {"user": user, "token": issuer.issue(user.id)}


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, db: DbSession, issuer: Issuer):
    user = db.execute(
        select(User).where(User.email == request.email)
    ).scalar_one_or_none()

    if user is None or not user.check_password(request.password):
        logger.warning("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return {"user": user, "token": issuer.issue(user.id)}


@router.post("/logout", response_model=MessageResponse)
def logout(user: CurrentUser):
    """Acknowledge a logout. Tokens are stateless, so nothing is revoked."""
    return {"message": "Logged out successfully"}


@router.get("/profile", response_model=ProfileResponse)
def profile(user: CurrentUser):
    return {"user": user}
