"""Account endpoints.

Endpoints:
- POST /api/auth/register - Create an account and return a token
- POST /api/auth/login - Exchange email/password for a token
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..deps import get_db, get_settings
from ..schemas import AuthResponse, LoginRequest, RegisterRequest, UserOut
from ..security import issue_token
from ..services import accounts
from ..settings import Settings

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = accounts.register_user(db, payload.username, payload.email, payload.password)
    return AuthResponse(
        message="User registered successfully.",
        token=issue_token(user, settings),
        user=UserOut.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = accounts.authenticate(db, payload.email, payload.password)
    return AuthResponse(
        message="Login successful.",
        token=issue_token(user, settings),
        user=UserOut.model_validate(user),
    )
