"""Authentication router."""
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from tenantrag.config import get_settings
from tenantrag.errors import ValidationFailed
from tenantrag.models.user import User
from tenantrag.repository import Repository, get_repository
from tenantrag.schemas.user import Token, UserCreate, UserRead
from tenantrag.security import authenticate_user, create_access_token, get_current_user, get_password_hash

router = APIRouter(tags=["auth"])
settings = get_settings()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: UserCreate,
    repo: Repository = Depends(get_repository)
):
    """Create an account with email and password."""
    if repo.get_user_by_email(user_in.email):
        raise ValidationFailed("Email already exists", field="email")

    user = repo.create_user(
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
        first_name=user_in.first_name,
        last_name=user_in.last_name,
    )
    logger.info(f"Registered user {user.id}")
    return user


@router.post("/auth/token", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    repo: Repository = Depends(get_repository)
):
    """Login and get access token."""
    user = authenticate_user(repo, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"sub": str(user.id)},
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes)
    )
    return Token(access_token=access_token)


@router.get("/auth/user", response_model=UserRead)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info."""
    return current_user
